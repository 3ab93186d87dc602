"""Interactive prompts used to complete and pick entries."""

import click
from rich.console import Console
from rich.prompt import Prompt

from bibadd.core.collection import Collection, CollectionResolver
from bibadd.core.models import Entry
from bibadd.core.resolver import FieldResolver
from bibadd.exceptions import BibaddError, ErrorKind


def text_prompt(prompt: str, console: Console | None = None) -> str:
    """Prompt for a non-empty line of text.

    Args:
        prompt: Prompt message
        console: Console to prompt on

    Returns:
        User input, stripped
    """
    while True:
        try:
            result = Prompt.ask(prompt, console=console)
        except EOFError as e:
            raise click.ClickException("User input cancelled") from e
        if result and result.strip():
            return result.strip()


def choice_prompt(
    prompt: str, items: list[str], console: Console | None = None
) -> int:
    """Show numbered items and prompt for one of them.

    Returns:
        Index of the selected item
    """
    console = console or Console()
    for number, item in enumerate(items, 1):
        console.print(f"  {number}. {item}", markup=False, highlight=False)

    choices = [str(number) for number in range(1, len(items) + 1)]
    try:
        result = Prompt.ask(prompt, choices=choices, default="1", console=console)
    except EOFError as e:
        raise click.ClickException("No selection made - cancelling operation") from e
    return int(result) - 1


def user_resolve_entry(resolver: FieldResolver, console: Console) -> None:
    """Prompt for every missing required field of ``resolver``."""
    console.print(
        f"Missing required fields for entry: {resolver.title}",
        markup=False,
        highlight=False,
    )
    while (required := resolver.next_required_entry()) is not None:
        with required:
            value = text_prompt(f"Enter value for the {required.key} field", console)
            required.insert(value)


def user_resolve_collection(
    resolver: CollectionResolver, console: Console
) -> Collection:
    """Prompt until every entry of ``resolver`` is complete."""
    result: Collection | CollectionResolver = resolver
    while isinstance(result, CollectionResolver):
        for field_resolver in result.unresolved():
            user_resolve_entry(field_resolver, console)
        result = result.resolve()
    return result


def resolve_entry(resolver: FieldResolver, console: Console) -> Entry:
    """Prompt until ``resolver`` resolves into an entry."""
    result: Entry | FieldResolver = resolver
    while isinstance(result, FieldResolver):
        user_resolve_entry(result, console)
        result = result.resolve()
    return result


def take_first(result: Collection | CollectionResolver) -> Entry | FieldResolver:
    """Take the first item of a lookup result without asking."""
    if isinstance(result, Collection):
        entries = result.into_entries()
        if not entries:
            raise BibaddError(ErrorKind.NO_VALUE, "Request did not find any results")
        return entries[0]

    item = result.checked_remove(0)
    if item is None:
        raise BibaddError(ErrorKind.NO_VALUE, "Request did not find any results")
    return item


def user_select(
    result: Collection | CollectionResolver, console: Console
) -> Entry | FieldResolver:
    """Let the user pick one item of a lookup result."""
    items = list(result)
    if len(items) <= 1:
        return take_first(result)

    index = choice_prompt("Choose an entry", [item.title for item in items], console)
    if isinstance(result, Collection):
        return items[index]

    item = result.checked_remove(index)
    if item is None:
        raise click.ClickException(
            "Internal error: selection should be valid and not out of range"
        )
    return item
