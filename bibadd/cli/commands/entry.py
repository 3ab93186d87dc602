"""Commands working on the entries of the local bibliography."""

import logging

import click

from bibadd.cli.interact import resolve_entry
from bibadd.core.fields import EntryKind
from bibadd.core.resolver import FieldResolver

logger = logging.getLogger(__name__)


class EntryKindType(click.ParamType):
    """Click parameter parsing entry kind labels."""

    name = "kind"

    def convert(self, value, param, ctx):
        if isinstance(value, EntryKind):
            return value
        return EntryKind.parse(value)


ENTRY_KIND = EntryKindType()


def split_field_names(values: tuple[str, ...]) -> list[str]:
    """Flatten repeated and comma separated ``--fields`` values."""
    names = []
    for value in values:
        names.extend(name.strip() for name in value.split(",") if name.strip())
    return names


@click.command()
@click.pass_context
def check(ctx: click.Context) -> str:
    """Check every entry of the bibliography has its required fields.

    The same check runs before every other command. Entries with missing
    fields can only be completed with -i / --interact.
    """
    # Loading resolves every entry or fails listing the missing fields
    ctx.obj.collection
    return "All entries contain the required fields!"


@click.command()
@click.argument("entry")
@click.argument("kind", type=ENTRY_KIND)
@click.argument("cite")
@click.option(
    "--fields",
    multiple=True,
    help="Extra fields to require on top of the kind's own (repeatable)",
)
@click.pass_context
def derive(
    ctx: click.Context,
    entry: str,
    kind: EntryKind,
    cite: str,
    fields: tuple[str, ...],
) -> str:
    """Derive a new entry from an existing one.

    Useful to add a "book chapter" entry based on an existing "book" entry.
    ENTRY is the cite key to derive from, KIND the kind of the new entry
    and CITE its cite key.

    KIND is one of article, book, booklet, book chapter, book pages, book
    section, in proceedings, manual, master thesis, phd thesis, proceedings,
    tech report or unpublished. Other kinds only require a title.
    """
    collection = ctx.obj.collection

    source = collection.get(entry)
    if source is None:
        raise click.ClickException(f"No entry found with the cite key of '{entry}'")

    resolver = FieldResolver(kind, cite)
    resolver.set_fields_from_entry(source)
    resolver.add_required_fields(split_field_names(fields))

    derived = resolve_entry(resolver, ctx.obj.console)
    collection.insert(derived)

    logger.info(
        "Entry with cite '%s' derived from '%s' and added to bibliography",
        derived.cite(),
        entry,
    )
    return derived.cite()


@click.command()
@click.argument("kind", type=ENTRY_KIND)
@click.option("--cite", help="Cite key of the new entry")
@click.option(
    "--fields",
    multiple=True,
    help="Extra fields to require on top of the kind's own (repeatable)",
)
@click.pass_context
def new(
    ctx: click.Context,
    kind: EntryKind,
    cite: str | None,
    fields: tuple[str, ...],
) -> str:
    """Add a new entry manually.

    Prompts for every required field even without -i / --interact. KIND
    takes the same values as for derive.
    """
    collection = ctx.obj.collection

    resolver = FieldResolver(kind, cite)
    resolver.add_required_fields(split_field_names(fields))

    created = resolve_entry(resolver, ctx.obj.console)
    collection.insert(created)

    logger.info("Entry with cite '%s' added to bibliography", created.cite())
    return created.cite()


@click.command()
@click.argument("cite")
@click.pass_context
def rm(ctx: click.Context, cite: str) -> str:
    """Remove an entry from the bibliography using its cite key."""
    collection = ctx.obj.collection

    logger.debug("Checking current bibliography for entry with this cite key..")
    if collection.remove(cite):
        return "Entry removed from bibliography"
    return f"No entry found with the cite key of '{cite}'"
