import pytest

from blogwriter.client import BlogWriterClient, build_prompt, request_article
from blogwriter.config import DEFAULT_MODEL, get_config_manager
from blogwriter.exceptions import (
    AuthenticationError,
    BlogWriterError,
    RateLimitError,
    ValidationError,
)
from blogwriter.markdown_formatter import format_markdown
from blogwriter.models import Article

from conftest import RecordingTransport, gemini_response


def test_prompt_embeds_topic_and_heading_guidance():
    prompt = build_prompt("Sourdough basics")
    assert '"Sourdough basics"' in prompt
    assert "1000-word" in prompt
    assert "# for main title, ## for sections, ### for subsections" in prompt


def test_generate_article(config_dir, article_transport):
    with BlogWriterClient(api_key="k", config_dir=config_dir, transport=article_transport) as client:
        article = client.generate_article("  Remote work  ")

    assert article.topic == "Remote work"
    assert article.model == DEFAULT_MODEL
    assert article.content.startswith("# Remote Work")
    assert article.title == "Remote Work"

    payload = article_transport.last_payload()
    assert '"Remote work"' in payload["contents"][0]["parts"][0]["text"]


def test_empty_topic_is_rejected_without_request(config_dir, article_transport):
    client = BlogWriterClient(api_key="k", config_dir=config_dir, transport=article_transport)
    with pytest.raises(ValidationError):
        client.generate_article("   ")
    assert article_transport.requests == []


def test_regenerate_reuses_last_topic(config_dir, article_transport):
    client = BlogWriterClient(api_key="k", config_dir=config_dir, transport=article_transport)

    with pytest.raises(BlogWriterError):
        client.regenerate()

    client.generate_article("Tea")
    article = client.regenerate()

    assert article.topic == "Tea"
    assert client.last_topic == "Tea"
    assert len(article_transport.requests) == 2


def test_errors_propagate_without_retry(config_dir):
    transport = RecordingTransport(status_code=429, body={"error": {"message": "slow down"}})
    client = BlogWriterClient(api_key="k", config_dir=config_dir, transport=transport)

    with pytest.raises(RateLimitError):
        client.generate_article("Tea")
    assert len(transport.requests) == 1


def test_api_key_and_model_from_config(config_dir, article_transport):
    manager = get_config_manager(config_dir)
    manager.set_api_key("stored-key")
    manager.set_model("gemini-1.5-pro")

    client = BlogWriterClient(config_dir=config_dir, transport=article_transport)
    assert client.has_api_key
    article = client.generate_article("Tea")

    request = article_transport.requests[0]
    assert request.url.params["key"] == "stored-key"
    assert "gemini-1.5-pro" in request.url.path
    assert article.model == "gemini-1.5-pro"


def test_render_article_and_text():
    article = Article(topic="t", content="# Hi\n\n- a", model="m")
    assert BlogWriterClient.render(article) == format_markdown(article.content)
    assert BlogWriterClient.render("**x**") == "<p><strong>x</strong></p>"


def test_article_reading_stats():
    article = Article(topic="t", content="word " * 450, model="m")
    assert article.word_count == 450
    assert article.reading_minutes == 3
    assert article.title is None


def test_request_article_returns_text(article_transport):
    text = request_article("Remote work", "k", transport=article_transport)
    assert text == "# Remote Work\n\nIt is **here** to stay."
    assert len(article_transport.requests) == 1


@pytest.mark.parametrize("credential", ["", "   "])
def test_request_article_requires_credential(credential, article_transport):
    with pytest.raises(AuthenticationError):
        request_article("Remote work", credential, transport=article_transport)
    assert article_transport.requests == []
