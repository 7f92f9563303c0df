import click

from .commands.resource import delete, get, list_


@click.group()
def cli():
    """
    RESTfulFoundation CLI — командная строка для обращения к REST API.
    """
    pass


cli.add_command(get)
cli.add_command(list_)
cli.add_command(delete)
