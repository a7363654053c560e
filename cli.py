"""CLI commands for wedding RSVP management."""

import asyncio
from datetime import UTC, datetime, timedelta

import jwt
import typer

from src.config.settings import settings
from src.rsvps.dtos import CoupleDTO, Side
from src.rsvps.errors import RSVPError
from src.rsvps.repository.category_registry import SqlCategoryRegistry
from src.rsvps.repository.read_models import SqlCoupleReadModel
from src.rsvps.repository.write_models import SqlCoupleWriteModel

app = typer.Typer(help="CLI commands for wedding RSVP management")

DEFAULT_CATEGORIES = [
    ("Bride's Family", Side.BRIDE, 100),
    ("Bride's Friends", Side.BRIDE, 50),
    ("Groom's Family", Side.GROOM, 100),
    ("Groom's Friends", Side.GROOM, 50),
]


async def _get_or_create_couple(name: str, email: str, side: Side) -> tuple[CoupleDTO, bool]:
    couple = await SqlCoupleReadModel().get_couple_by_email(email)
    if couple is not None:
        return couple, False
    return await SqlCoupleWriteModel().create_couple(name=name, email=email, side=side), True


async def _couple_for_side(side: Side) -> CoupleDTO:
    email = settings.brides_email if side is Side.BRIDE else settings.grooms_email
    couple = await SqlCoupleReadModel().get_couple_by_email(email) if email else None
    if couple is None:
        raise ValueError(f"No couple found for {side.value}, run `seed` first")
    return couple


@app.command()
def seed():
    """Create the bride, the groom and their four starting categories. Safe to re-run."""
    if not settings.brides_email or not settings.grooms_email:
        typer.secho("Set BRIDES_EMAIL and GROOMS_EMAIL first.", fg=typer.colors.RED)
        raise typer.Exit(1)

    async def _seed():
        owners = {}
        created_couples = []
        for name, email, side in (
            (settings.brides_name, settings.brides_email, Side.BRIDE),
            (settings.grooms_name, settings.grooms_email, Side.GROOM),
        ):
            couple, created = await _get_or_create_couple(name, email, side)
            owners[side] = couple
            if created:
                created_couples.append(couple)

        registry = SqlCategoryRegistry()
        created_categories = []
        for name, side, max_guests in DEFAULT_CATEGORIES:
            if await registry.get_category_by_name(name) is not None:
                continue
            category = await registry.create_category(
                name=name, side=side, max_guests=max_guests, couple_id=owners[side].uuid
            )
            created_categories.append(category)

        return created_couples, created_categories

    couples, categories = asyncio.run(_seed())

    for couple in couples:
        typer.secho(f"Created couple {couple.name} ({couple.side.value})", fg=typer.colors.GREEN)
    for category in categories:
        typer.secho(f"Created category {category.name}", fg=typer.colors.GREEN)
        typer.secho(
            f"  Invitation link: {settings.invitation_link(category.invitation_token)}",
            fg=typer.colors.CYAN,
        )
    if not couples and not categories:
        typer.secho("Nothing to do, everything is already seeded.", fg=typer.colors.YELLOW)


@app.command()
def create_category(
    name: str = typer.Argument(..., help="Category name, unique across both sides"),
    side: Side = typer.Option(..., "--side", "-s", help="BRIDE or GROOM"),
    max_guests: int = typer.Option(..., "--max-guests", "-m", help="Guest quota"),
    default: bool = typer.Option(False, "--default", help="Make this the side's catch-all"),
):
    """Create a category owned by the couple of the given side."""

    async def _create_category():
        couple = await _couple_for_side(side)
        return await SqlCategoryRegistry().create_category(
            name=name,
            side=side,
            max_guests=max_guests,
            couple_id=couple.uuid,
            is_default=default,
        )

    try:
        category = asyncio.run(_create_category())
    except (RSVPError, ValueError) as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(f"Category {category.name} created!", fg=typer.colors.GREEN)
    typer.secho(f"  Max guests: {category.max_guests}", fg=typer.colors.BLUE)
    typer.secho(
        f"  Invitation link: {settings.invitation_link(category.invitation_token)}",
        fg=typer.colors.CYAN,
    )


@app.command()
def list_categories(
    side: Side = typer.Option(..., "--side", "-s", help="BRIDE or GROOM"),
):
    """Show a side's categories with invitation links and remaining capacity."""

    async def _list_categories():
        couple = await _couple_for_side(side)
        return await SqlCategoryRegistry().list_categories(couple.uuid)

    try:
        capacities = asyncio.run(_list_categories())
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    if not capacities:
        typer.secho("No categories yet.", fg=typer.colors.YELLOW)
    for capacity in capacities:
        category = capacity.category
        label = f"{category.name} (default)" if category.is_default else category.name
        remaining_color = typer.colors.RED if capacity.remaining_guests <= 0 else typer.colors.BLUE
        typer.secho(label, fg=typer.colors.GREEN)
        typer.secho(
            f"  {capacity.approved_guests}/{category.max_guests} approved, "
            f"{capacity.remaining_guests} remaining",
            fg=remaining_color,
        )
        typer.secho(
            f"  {settings.invitation_link(category.invitation_token)}", fg=typer.colors.CYAN
        )


@app.command()
def admin_token(
    email: str = typer.Argument(..., help="Email of the bride or groom"),
    hours: int = typer.Option(
        settings.admin_token_expire_hours, "--hours", help="Token lifetime in hours"
    ),
):
    """Print a bearer token for the admin endpoints."""
    couple = asyncio.run(SqlCoupleReadModel().get_couple_by_email(email))
    if couple is None:
        typer.secho(f"Couple not found: {email}", fg=typer.colors.RED)
        raise typer.Exit(1)

    now = datetime.now(UTC)
    token = jwt.encode(
        {"sub": str(couple.uuid), "iat": now, "exp": now + timedelta(hours=hours)},
        settings.secret_key,
        algorithm=settings.algorithm,
    )
    typer.secho(f"Token for {couple.name} ({couple.side.value}):", fg=typer.colors.GREEN)
    typer.echo(token)


if __name__ == "__main__":
    app()
