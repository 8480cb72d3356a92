"""Typer CLI entry point."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from outreach_assistant.analyzer.context_analyzer import ContextEnricher
from outreach_assistant.config import get_settings
from outreach_assistant.errors import OutreachError, QuotaExceededError
from outreach_assistant.generator.client import GenerationClient
from outreach_assistant.generator.message_generator import MessageGenerator
from outreach_assistant.generator.prompts.channels import CHANNEL_POLICIES, CHANNEL_ALIASES
from outreach_assistant.models.contact import ContactProfile, SellerProfile
from outreach_assistant.models.message import GenerationRequest, GenerationResult
from outreach_assistant.scraper.fetcher import Fetcher
from outreach_assistant.storage.protocols import MESSAGES
from outreach_assistant.storage.sqlite_store import SQLiteStore, TIER_LIMITS

app = typer.Typer(
    name="outreach",
    help="AI-assisted outreach message drafting",
    no_args_is_help=True,
)
console = Console()

USER_OPTION = typer.Option("local", "--user", "-u", help="User id to act as")


def _configure_logging(verbose: bool):
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=console, rich_tracebacks=True, show_time=False, show_path=False)]
        )


def _run(coro):
    """Run a coroutine, turning pipeline errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except QuotaExceededError as e:
        console.print(f"[red]{e}[/red]")
        console.print("[yellow]Upgrade the plan with `outreach set-plan` or wait for next month.[/yellow]")
        raise typer.Exit(1)
    except OutreachError as e:
        console.print(f"[red]Error ({type(e).__name__}): {e}[/red]")
        raise typer.Exit(1)


@app.command()
def generate(
    channel: str = typer.Option(..., "--channel", "-c", help="Target channel, e.g. email or linkedin_dm"),
    objective: str = typer.Option(..., "--objective", "-o", help="Outcome you want from the message"),
    contact_id: Optional[str] = typer.Option(None, "--contact-id", help="Stored contact to write for"),
    name: str = typer.Option("", "--name", help="Contact name"),
    title: Optional[str] = typer.Option(None, "--title", help="Contact title"),
    company: Optional[str] = typer.Option(None, "--company", help="Contact company"),
    website: Optional[str] = typer.Option(None, "--website", help="Contact company website"),
    history_file: Optional[Path] = typer.Option(None, "--history-file", help="Text file with prior communications"),
    seller_company: Optional[str] = typer.Option(None, "--seller-company"),
    seller_website: Optional[str] = typer.Option(None, "--seller-website"),
    products_url: Optional[str] = typer.Option(None, "--products-url", help="Page listing your products"),
    product_description: Optional[str] = typer.Option(None, "--product-description"),
    tone: str = typer.Option("professional", "--tone", "-t"),
    product: str = typer.Option("", "--product", "-p", help="Product to focus on"),
    enrich: bool = typer.Option(True, "--enrich/--no-enrich", help="Summarize websites before drafting"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    user_id: str = USER_OPTION,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """Generate four message variants for a contact."""
    _configure_logging(verbose)

    if not contact_id and not name:
        console.print("[red]Error: pass --contact-id or at least --name[/red]")
        raise typer.Exit(1)

    communications = ""
    if history_file is not None:
        if not history_file.exists():
            console.print(f"[red]Error: history file not found: {history_file}[/red]")
            raise typer.Exit(1)
        communications = history_file.read_text(encoding="utf-8")

    seller = SellerProfile(
        company=seller_company,
        website=seller_website,
        products_url=products_url,
        product_description=product_description,
    )
    contact = ContactProfile(name=name, title=title, company=company, website=website)

    result = _run(_generate_async(
        user_id=user_id,
        contact_id=contact_id,
        contact=contact,
        seller=seller,
        communications=communications,
        channel=channel,
        objective=objective,
        tone=tone,
        product=product,
        enrich=enrich,
    ))

    if as_json:
        console.print_json(json.dumps(result.to_dict()))
    else:
        _display_result(result)


async def _generate_async(
    user_id: str,
    contact_id: Optional[str],
    contact: ContactProfile,
    seller: SellerProfile,
    communications: str,
    channel: str,
    objective: str,
    tone: str,
    product: str,
    enrich: bool,
) -> GenerationResult:
    """Async implementation of generate command."""
    settings = get_settings()
    async with SQLiteStore() as store:
        async with Fetcher() as fetcher:
            client = GenerationClient(settings)
            enricher = ContextEnricher(fetcher, client, cache=store) if enrich else None
            generator = MessageGenerator(
                client,
                quota=store,
                store=store,
                enricher=enricher,
                contacts=store,
                settings=settings,
            )

            with console.status("Generating messages..."):
                if contact_id:
                    # Extra history passed on the command line is ignored for stored contacts
                    return await generator.generate_for_contact(
                        user_id,
                        contact_id,
                        channel=channel,
                        objective=objective,
                        seller=seller,
                        tone=tone,
                        product=product,
                        timeout=settings.generation_timeout_seconds,
                    )

                request = GenerationRequest(
                    contact=contact,
                    seller=seller,
                    communications=communications,
                    channel=channel,
                    objective=objective,
                    tone=tone,
                    product=product,
                )
                return await generator.generate_messages(
                    request, user_id, timeout=settings.generation_timeout_seconds
                )


def _display_result(result: GenerationResult):
    """Display variants in a formatted table."""
    table = Table(title=f"Session {result.session_id}", show_lines=True)
    table.add_column("Variant", style="cyan", width=14)
    table.add_column("Message", width=70)
    table.add_column("Why it fits", width=30)

    for variant in result.variants:
        table.add_row(variant.variant.value, variant.content, variant.match_reason or "")

    console.print(table)

    if result.dropped_count:
        console.print(f"[yellow]{result.dropped_count} malformed variant(s) dropped[/yellow]")
    if not result.persisted:
        console.print("[yellow]Warning: messages were not saved to history[/yellow]")


@app.command("analyze-website")
def analyze_website(
    url: str = typer.Argument(..., help="Website to analyze"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """Extract company name, description and products from a website."""
    _configure_logging(verbose)
    analysis = _run(_analyze_website_async(url))

    console.print(
        Panel(
            f"[bold]{analysis.company_name or 'Unknown company'}[/bold]\n"
            f"{analysis.description}\n\n"
            f"Target audience: {analysis.target_audience or 'Unknown'}",
            title=url,
        )
    )
    for product in analysis.products:
        console.print(f"  • {product}")


async def _analyze_website_async(url: str):
    """Async implementation of analyze-website command."""
    async with Fetcher() as fetcher:
        enricher = ContextEnricher(fetcher, GenerationClient())
        with console.status("Analyzing website..."):
            return await enricher.analyze_website(url)


@app.command()
def channels():
    """List supported channels and their guidance."""
    table = Table(title="Channels")
    table.add_column("Channel", style="cyan")
    table.add_column("Guidance")

    for channel, policy in CHANNEL_POLICIES.items():
        table.add_row(channel.value, policy.guidance)

    console.print(table)
    aliases = ", ".join(f"{alias} → {channel.value}" for alias, channel in CHANNEL_ALIASES.items())
    console.print(f"[dim]Aliases: {aliases}[/dim]")


@app.command("add-contact")
def add_contact(
    name: str = typer.Argument(..., help="Contact name"),
    title: Optional[str] = typer.Option(None, "--title"),
    company: Optional[str] = typer.Option(None, "--company"),
    website: Optional[str] = typer.Option(None, "--website"),
    linkedin_url: Optional[str] = typer.Option(None, "--linkedin"),
    notes: Optional[str] = typer.Option(None, "--notes"),
    stage: Optional[str] = typer.Option(None, "--stage", help="Funnel stage, e.g. cold or engaged"),
    goal: Optional[str] = typer.Option(None, "--goal", help="Relationship goal, e.g. client or partner"),
    user_id: str = USER_OPTION,
):
    """Store a contact for later generation."""
    contact = ContactProfile(
        name=name,
        title=title,
        company=company,
        website=website,
        linkedin_url=linkedin_url,
        notes=notes,
        funnel_stage=stage,
        relationship_goal=goal,
    )
    contact_id = asyncio.run(_add_contact_async(user_id, contact))
    console.print(f"[green]Contact saved:[/green] {contact_id}")


async def _add_contact_async(user_id: str, contact: ContactProfile) -> str:
    async with SQLiteStore() as store:
        return await store.add_contact(user_id, contact)


@app.command()
def contacts(user_id: str = USER_OPTION):
    """List stored contacts."""
    rows = asyncio.run(_contacts_async(user_id))
    if not rows:
        console.print("[yellow]No contacts stored yet[/yellow]")
        return

    table = Table(title="Contacts")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Title")
    table.add_column("Company")
    table.add_column("Domain")

    for contact in rows:
        table.add_row(contact.id, contact.name, contact.title or "", contact.company or "", contact.domain or "")
    console.print(table)


async def _contacts_async(user_id: str) -> list[ContactProfile]:
    async with SQLiteStore() as store:
        return await store.list_contacts(user_id)


@app.command("log-communication")
def log_communication(
    contact_id: str = typer.Argument(..., help="Stored contact id"),
    content: str = typer.Argument(..., help="What was said"),
    channel: str = typer.Option("other", "--channel", "-c"),
    inbound: bool = typer.Option(False, "--inbound", help="The contact wrote to you"),
    user_id: str = USER_OPTION,
):
    """Record a message exchanged with a contact."""
    direction = "inbound" if inbound else "outbound"
    asyncio.run(_log_communication_async(user_id, contact_id, content, channel, direction))
    console.print("[green]Communication logged[/green]")


async def _log_communication_async(user_id, contact_id, content, channel, direction):
    async with SQLiteStore() as store:
        await store.log_communication(user_id, contact_id, content, channel=channel, direction=direction)


@app.command()
def messages(
    limit: int = typer.Option(50, "--limit", "-l", help="Number of messages to show"),
    user_id: str = USER_OPTION,
):
    """Show recently generated messages."""
    rows = asyncio.run(_messages_async(user_id, limit))
    if not rows:
        console.print("[yellow]No messages generated yet[/yellow]")
        return

    table = Table(title="Recent Messages", show_lines=True)
    table.add_column("Created", style="dim", width=19)
    table.add_column("Session", width=10)
    table.add_column("Channel", style="cyan")
    table.add_column("Variant")
    table.add_column("Message", width=60)

    for row in rows:
        table.add_row(
            row["created_at"][:19],
            row["session_id"][:8],
            row["channel"],
            row["variant"],
            row["content"],
        )
    console.print(table)


async def _messages_async(user_id: str, limit: int) -> list[dict]:
    async with SQLiteStore() as store:
        return await store.get_recent_messages(user_id, limit=limit)


@app.command()
def usage(user_id: str = USER_OPTION):
    """Show plan and usage for this month."""
    tier, status, stats = asyncio.run(_usage_async(user_id))

    table = Table(title="Usage")
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    table.add_row("User", user_id)
    table.add_row("Plan", tier)
    table.add_row("Messages this month", f"{status.used}/{status.limit}")
    table.add_row("Remaining", str(status.remaining))
    table.add_row("Stored contacts", str(stats["contacts"]))
    table.add_row("Generation sessions", str(stats["sessions"]))
    table.add_row("Cached summaries", str(stats["cached_summaries"]))

    console.print(table)


async def _usage_async(user_id: str):
    async with SQLiteStore() as store:
        tier = await store.get_plan(user_id)
        status = await store.check_quota(user_id, MESSAGES)
        stats = await store.get_stats()
        return tier, status, stats


@app.command("set-plan")
def set_plan(
    tier: str = typer.Argument(..., help=f"One of: {', '.join(TIER_LIMITS)}"),
    user_id: str = USER_OPTION,
):
    """Change a user's subscription tier."""
    if tier not in TIER_LIMITS:
        console.print(f"[red]Error: unknown tier {tier}[/red]")
        raise typer.Exit(1)

    asyncio.run(_set_plan_async(user_id, tier))
    console.print(f"[green]{user_id} is now on {tier} ({TIER_LIMITS[tier]['messages']} messages/month)[/green]")


async def _set_plan_async(user_id: str, tier: str):
    async with SQLiteStore() as store:
        await store.set_plan(user_id, tier)


@app.command("clear-cache")
def clear_cache(
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    expired_only: bool = typer.Option(False, "--expired", help="Only remove summaries past their TTL"),
):
    """Clear cached website summaries."""
    if expired_only:
        asyncio.run(_clear_cache_async(expired_only=True))
        console.print("[green]Expired summaries removed[/green]")
        return

    if not confirm:
        confirm = typer.confirm("Are you sure you want to clear all cached summaries?")

    if confirm:
        asyncio.run(_clear_cache_async())
        console.print("[green]Cache cleared successfully![/green]")
    else:
        console.print("[yellow]Cancelled[/yellow]")


async def _clear_cache_async(expired_only: bool = False):
    """Async implementation of clear-cache command."""
    async with SQLiteStore() as store:
        if expired_only:
            await store.clear_expired()
        else:
            await store.clear_enrichment_cache()


if __name__ == "__main__":
    app()
