import json
from typing import List, Optional

import click
from rich.console import Console
from rich.table import Table

from restful_foundation.config import RESTConfig
from restful_foundation.core.connection import RESTConnection
from restful_foundation.models import DynamicObject


root_option = click.option(
    "--root",
    "root_path",
    envvar="RESTFUL_ROOT_PATH",
    help="Корневой URL API (по умолчанию RESTFUL_ROOT_PATH)",
)


def _connect(root_path: Optional[str]) -> RESTConnection:
    settings = RESTConfig()
    if root_path:
        settings.root_path = root_path
    try:
        return RESTConnection.from_config(settings)
    except ValueError as e:
        raise click.UsageError(str(e)) from e


def _print_info(console: Console, info: List[str]) -> None:
    for line in info:
        console.print(f"[bold red]Ошибка:[/] {line}")


@click.command()
@click.argument("path")
@click.argument("entity_id", required=False)
@root_option
def get(path, entity_id, root_path):
    """
    Получить сущность (или ресурс целиком) по пути и идентификатору.
    """
    console = Console()
    connection = _connect(root_path)

    result = connection.get(path, entity_id, response_model=DynamicObject)
    if result is None:
        _print_info(console, connection.info)
        raise SystemExit(1)

    console.print_json(json.dumps(result.model_dump(by_alias=True), ensure_ascii=False))


@click.command("list")
@click.argument("path")
@click.option("--page", type=int, help="Номер страницы (с нуля)")
@click.option("--per-page", type=int, help="Размер страницы")
@click.option("--query", default=None, help="Строка запроса, параметры через &")
@root_option
def list_(path, page, per_page, query, root_path):
    """
    Получить список сущностей.
    """
    console = Console()
    connection = _connect(root_path)

    result = connection.list(path, response_model=DynamicObject, page=page, per_page=per_page, query=query)
    if connection.info:
        _print_info(console, connection.info)
        raise SystemExit(1)

    rows = [item.model_dump(by_alias=True) for item in result.items]
    columns = sorted({key for row in rows for key in row})

    table = Table(title=f"{path} ({result.total_records} записей)")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*[str(row.get(column, "")) for column in columns])
    console.print(table)

    if result.page is not None:
        console.print(f"Страница {result.page}, по {result.per_page} на странице")


@click.command()
@click.argument("path")
@click.argument("entity_id")
@root_option
def delete(path, entity_id, root_path):
    """
    Удалить сущность по идентификатору.
    """
    console = Console()
    connection = _connect(root_path)

    if not connection.delete(path, entity_id):
        _print_info(console, connection.info)
        raise SystemExit(1)

    console.print(f"[bold green]Удалено:[/] {path} {entity_id}")
