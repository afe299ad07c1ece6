import asyncio
import typer

from nexus.config import settings
from nexus.services.prospector import DashboardSnapshot, ProbeOutcome, Service
from nexus.services.prospector.export import export_csv
from nexus.services.store import StoreConfigError
from nexus.services.store.local_settings import LocalSettingsStore
from nexus.services.store.models import LeadWithEnrichment

app = typer.Typer(help="Nexus Leads: AI lead prospecting and enrichment")


def _service() -> Service:
    try:
        return Service()
    except StoreConfigError as e:
        print(f"❌ {e}")
        raise typer.Exit(code=1)


def _lead_line(lead: LeadWithEnrichment) -> str:
    e = lead.enrichment
    score = f"{e.ai_score:>3.0f}" if e else "  -"
    status = "Email Authenticated" if e and e.validated else "Identity Pending"
    networks = ",".join(e.social_profiles.found()) if e and e.social_profiles else ""
    return f"{score}  {lead.company_name:<40.40} {lead.source:<18.18} {status:<20} {networks}"


def _print_leads(snap: DashboardSnapshot) -> None:
    if not snap.leads:
        print("No leads in pipeline. Use `nexus probe` to find businesses.")
        return
    for lead in snap.leads:
        print(_lead_line(lead))


@app.command()
def probe(
    query: str = typer.Argument(..., help="What to prospect for, e.g. 'Solar panel distributors in Dubai'"),
):
    """
    Run one probe cycle: discover businesses, save them, enrich each one.

    Examples:
        nexus probe "Solar panel distributors in Dubai"
    """

    async def run():
        service = _service()
        service.state.subscribe(_echo_new_logs())
        result = await service.run_probe(query)
        snap = service.state.snapshot()
        print()
        _print_leads(snap)
        if snap.insight:
            print(f'\n"{snap.insight}"')
        if result.outcome == ProbeOutcome.FAILED:
            raise typer.Exit(code=1)

    asyncio.run(run())


def _echo_new_logs():
    """Listener printing each log line as it is added."""
    seen = 0

    def listener(snap: DashboardSnapshot) -> None:
        nonlocal seen
        fresh = min(snap.log_count - seen, len(snap.logs))
        for line in reversed(snap.logs[:fresh]):
            print(f"> {line}")
        seen = snap.log_count

    return listener


@app.command()
def leads():
    """Refresh and print the lead pipeline, newest first."""

    async def run():
        service = _service()
        await service.refresh()
        _print_leads(service.state.snapshot())

    asyncio.run(run())


@app.command()
def dashboard(
    top: int = typer.Option(5, "--top", "-t", help="Number of top performers to show"),
):
    """Refresh and print aggregate stats, top performers and the AI insight."""

    async def run():
        service = _service()
        await service.refresh()
        snap = service.state.snapshot()
        stats = snap.stats
        print(f"Total Ingested:    {stats.total_leads}")
        print(f"Verified Emails:   {stats.verified_emails}")
        print(f"High-Ready (90+):  {stats.high_readiness}")
        print("\nTop Performers:")
        performers = snap.top_performers(top)
        if not performers:
            print("  No top performers found.")
        for lead in performers:
            print(f"  {_lead_line(lead)}")
        print(f'\nAI Intelligence Summary:\n  "{snap.insight}"')
        for line in snap.logs:
            print(f"> {line}")

    asyncio.run(run())


@app.command()
def export(
    path: str = typer.Argument("leads.csv", help="Destination CSV file"),
):
    """Refresh and export every lead with its enrichment to CSV."""

    async def run():
        service = _service()
        await service.refresh()
        count = export_csv(service.state.snapshot().leads, path)
        print(f"✅ Exported {count} leads to {path}")

    asyncio.run(run())


@app.command("config-show")
def config_show():
    """Show the local settings file (keys are masked)."""
    store = LocalSettingsStore(settings.local_settings_path)
    values = store.all()
    print(f"Settings file: {store.path}")
    if not values:
        print("  (empty)")
    for key, value in sorted(values.items()):
        shown = value if "key" not in key else f"{value[:12]}…"
        print(f"  {key} = {shown}")


@app.command("config-set")
def config_set(
    key: str = typer.Argument(..., help="Setting name, e.g. store_url or store_key"),
    value: str = typer.Argument(..., help="New value"),
):
    """Write one value to the local settings file."""
    LocalSettingsStore(settings.local_settings_path).set(key, value)
    print(f"✅ {key} updated")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Serve the dashboard HTTP API."""
    import uvicorn

    uvicorn.run("nexus.app:app", host=host, port=port, reload=reload)
