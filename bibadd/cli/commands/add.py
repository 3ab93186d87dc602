"""Commands adding entries found by the lookup services."""

import logging

import click

from bibadd.api.crossref import entries_by_doi, entry_stubs_by_title
from bibadd.api.format_api import entries_by_url
from bibadd.api.google_books import entries_by_isbn
from bibadd.api.ietf import entries_by_rfc
from bibadd.cli.interact import choice_prompt, resolve_entry, take_first, user_select
from bibadd.core.collection import INTERACT_HINT, Collection, CollectionResolver
from bibadd.core.models import Entry

logger = logging.getLogger(__name__)


def check_entry_field_duplication(
    collection: Collection, name: str, value: str
) -> None:
    """Fail if an entry already has ``value`` in its ``name`` field."""
    logger.debug(
        "Checking current bibliography for possible duplicate %s of '%s'", name, value
    )
    if collection.contains_field(name, lambda field: field == value):
        raise click.ClickException(
            f"An entry already exists with a {name} field with the value of '{value}'."
        )
    logger.debug("No duplicate found!")


def add_from_result(ctx: click.Context, result: Collection | CollectionResolver) -> str:
    """Pick an entry from a lookup result, complete it and add it.

    Returns:
        The cite key of the added entry
    """
    app = ctx.obj
    if app.interact:
        item = user_select(result, app.console)
    else:
        item = take_first(result)

    if not isinstance(item, Entry):
        if not app.interact:
            raise click.ClickException(f"{item}{INTERACT_HINT}")
        item = resolve_entry(item, app.console)

    app.collection.insert(item)
    logger.info("Entry with cite '%s' added to bibliography", item.cite())
    return item.cite()


@click.group()
def add():
    """Add an entry to the current bibliography file."""
    pass


@add.command()
@click.argument("doi")
@click.pass_context
def doi(ctx: click.Context, doi: str) -> str:
    """Search for an entry by DOI."""
    check_entry_field_duplication(ctx.obj.collection, "doi", doi)
    return add_from_result(ctx, entries_by_doi(doi, client=ctx.obj.client))


@add.command()
@click.argument("isbn")
@click.pass_context
def isbn(ctx: click.Context, isbn: str) -> str:
    """Search for a book by ISBN."""
    check_entry_field_duplication(ctx.obj.collection, "isbn", isbn.replace("-", ""))
    return add_from_result(ctx, entries_by_isbn(isbn, client=ctx.obj.client))


@add.command()
@click.argument("number", type=click.IntRange(min=1))
@click.pass_context
def rfc(ctx: click.Context, number: int) -> str:
    """Search for an RFC by its number."""
    collection = ctx.obj.collection
    logger.debug("Adding RFC %d to %d entries", number, len(collection))
    return add_from_result(ctx, entries_by_rfc(number, client=ctx.obj.client))


@add.command()
@click.argument("url")
@click.pass_context
def url(ctx: click.Context, url: str) -> str:
    """Fetch BibTeX from any URL."""
    collection = ctx.obj.collection
    logger.debug("Adding entries from %s to %d entries", url, len(collection))
    return add_from_result(ctx, entries_by_url(url, client=ctx.obj.client))


@add.command()
@click.argument("title")
@click.pass_context
def title(ctx: click.Context, title: str) -> str:
    """Search Crossref by title and add the chosen work."""
    collection = ctx.obj.collection
    stubs = entry_stubs_by_title(title, client=ctx.obj.client)

    if ctx.obj.interact and len(stubs) > 1:
        labels = [f"{stub.first_title} ({stub.doi})" for stub in stubs]
        chosen = stubs[choice_prompt("Choose a work", labels, ctx.obj.console)]
    else:
        chosen = stubs[0]

    check_entry_field_duplication(collection, "doi", chosen.doi)
    return add_from_result(ctx, entries_by_doi(chosen.doi, client=ctx.obj.client))
