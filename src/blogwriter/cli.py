"""
CLI интерфейс для BlogWriter Client.

Использование:
    blogwriter key set
    blogwriter generate "Remote work in 2024"
    blogwriter generate "Remote work in 2024" --html -o article.html
    blogwriter render article.md
"""

import logging
import sys
import os
from pathlib import Path
from typing import Optional

# Windows кодировка
if sys.platform == "win32":
    os.environ.setdefault("PYTHONIOENCODING", "utf-8")

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markdown import Markdown

from blogwriter.client import BlogWriterClient
from blogwriter.config import get_config_manager, mask_key
from blogwriter.exceptions import (
    BlogWriterError,
    AuthenticationError,
    RateLimitError,
    EmptyResultError,
    TransportError,
    ValidationError,
)
from blogwriter.markdown_formatter import format_markdown

console = Console()


def setup_logging(verbose: bool) -> None:
    """Настроить логирование пакета blogwriter."""
    level = logging.DEBUG if verbose else logging.WARNING
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('%(levelname)s:%(name)s:%(message)s'))

    root_logger = logging.getLogger('blogwriter')
    root_logger.setLevel(level)
    if not root_logger.handlers:
        root_logger.addHandler(handler)
    root_logger.propagate = False


def error(message: str) -> None:
    """Вывести ошибку."""
    console.print(f"[red]✗[/red] {message}")


def success(message: str) -> None:
    """Вывести успех."""
    console.print(f"[green]✓[/green] {message}")


def info(message: str) -> None:
    """Вывести информацию."""
    console.print(f"[blue]ℹ[/blue] {message}")


def write_output(content: str, output: Optional[str]) -> None:
    """Записать результат в файл или вывести в stdout."""
    if output:
        try:
            Path(output).write_text(content, encoding="utf-8")
        except OSError as e:
            error(f"Не удалось записать {output}: {e}")
            sys.exit(1)
        success(f"Сохранено: {output}")
    else:
        click.echo(content)


@click.group()
@click.option(
    "--api-key", "-k",
    envvar="GEMINI_API_KEY",
    help="Gemini API key (по умолчанию: из конфигурации)"
)
@click.option("--model", "-m", help="Модель генерации")
@click.option("--config-dir", type=click.Path(file_okay=False), help="Директория конфигурации")
@click.option("--verbose", "-v", is_flag=True, help="Подробный вывод (DEBUG)")
@click.pass_context
def main(ctx, api_key: Optional[str], model: Optional[str], config_dir: Optional[str], verbose: bool):
    """BlogWriter CLI - генерация статей через Gemini API."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["api_key"] = api_key
    ctx.obj["model"] = model
    ctx.obj["config_dir"] = Path(config_dir) if config_dir else None


# ===== KEY COMMANDS =====

@main.group()
def key():
    """Управление ключом Gemini API."""
    pass


@key.command("set")
@click.option("--value", prompt="Gemini API key", hide_input=True, help="Ключ API")
@click.pass_context
def key_set(ctx, value: str):
    """Сохранить ключ API."""
    if not value.strip():
        error("Ключ не может быть пустым")
        sys.exit(1)

    config = get_config_manager(ctx.obj.get("config_dir"))
    config.set_api_key(value)
    success("Ключ API сохранён. Можно генерировать статьи.")


@key.command("clear")
@click.pass_context
def key_clear(ctx):
    """Удалить сохранённый ключ API."""
    config = get_config_manager(ctx.obj.get("config_dir"))
    config.clear_api_key()
    success("Ключ API удалён")


@key.command("show")
@click.pass_context
def key_show(ctx):
    """Показать сохранённый ключ (маскированный)."""
    config = get_config_manager(ctx.obj.get("config_dir"))
    api_key = config.get_api_key()
    if api_key:
        info(f"Ключ API: {mask_key(api_key)}")
    else:
        info("Ключ API не задан. Выполните: blogwriter key set")


# ===== CONFIG =====

@main.command("config")
@click.pass_context
def show_config(ctx):
    """Показать текущие настройки."""
    cfg = get_config_manager(ctx.obj.get("config_dir")).get_config()

    table = Table(title="Настройки", show_header=False)
    table.add_column("Параметр", style="cyan")
    table.add_column("Значение")

    table.add_row("Модель", cfg.model)
    table.add_row("API URL", cfg.base_url)
    table.add_row("Температура", str(cfg.temperature))
    table.add_row("Макс. токенов", str(cfg.max_output_tokens))
    table.add_row(
        "Gemini API Key",
        f"✓ {mask_key(cfg.api_key)}" if cfg.api_key else "✗ не настроен"
    )

    console.print(table)


# ===== GENERATION =====

@main.command()
@click.argument("topic")
@click.option("--html", "as_html", is_flag=True, help="Вывести HTML вместо markdown")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Файл для сохранения")
@click.pass_context
def generate(ctx, topic: str, as_html: bool, output: Optional[str]):
    """Сгенерировать статью по теме."""
    try:
        client = BlogWriterClient(
            api_key=ctx.obj.get("api_key"),
            model=ctx.obj.get("model"),
            config_dir=ctx.obj.get("config_dir"),
        )
        if not client.has_api_key:
            error("Ключ API не задан. Выполните: blogwriter key set")
            sys.exit(1)

        with client:
            with console.status("Генерация статьи..."):
                article = client.generate_article(topic)

        info(f"{article.word_count} слов • {article.reading_minutes} мин. чтения")

        if as_html:
            write_output(client.render(article), output)
        elif output:
            write_output(article.content, output)
        else:
            console.print(Panel(
                Markdown(article.content),
                title=article.title or "Статья",
                border_style="green"
            ))

    except ValidationError as e:
        error(f"Некорректная тема: {e.message}")
        sys.exit(1)
    except AuthenticationError as e:
        error(f"Ошибка авторизации: {e.message}")
        sys.exit(1)
    except RateLimitError as e:
        error(f"Превышен лимит запросов: {e.message}")
        sys.exit(1)
    except EmptyResultError as e:
        error(f"Пустой ответ: {e.message}")
        sys.exit(1)
    except TransportError as e:
        error(f"Ошибка сети: {e.message}")
        sys.exit(1)
    except BlogWriterError as e:
        error(f"Ошибка: {e.message}")
        sys.exit(1)


@main.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Файл для сохранения")
def render(file_path: str, output: Optional[str]):
    """Преобразовать markdown-файл в HTML."""
    try:
        text = Path(file_path).read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as e:
        error(f"Не удалось прочитать {file_path}: {e}")
        sys.exit(1)
    write_output(format_markdown(text), output)


if __name__ == "__main__":
    main()
