# manage.py

from dotenv import load_dotenv
load_dotenv()

import asyncio
from typing import Optional

import typer
import uvicorn
from typing_extensions import Annotated

# CLI manajemen untuk project FastAPI, dibangun dengan Typer
cli = typer.Typer(
    help="Manajemen CLI untuk iMAPS API."
)

# --- Database Commands ---

@cli.command()
def init_db():
    """
    Inisialisasi database dan membuat semua tabel.
    """
    # Import dependency di dalam fungsi agar tidak dieksekusi saat startup
    from imaps.database import Base, async_engine
    # Registrasi semua model ke Base.metadata
    import imaps.models  # noqa: F401

    async def create_tables():
        async with async_engine.begin() as conn:
            typer.echo("Membuat semua tabel sesuai models...")
            await conn.run_sync(Base.metadata.create_all)
        typer.secho("Database berhasil diinisialisasi.", fg=typer.colors.GREEN)

    asyncio.run(create_tables())


@cli.command()
def seed_item_types():
    """
    Isi tabel item_types dengan item type default (ROH, HALB, FERT, ...).
    """
    from imaps.database import AsyncSessionLocal
    from imaps.services.master import ItemTypeService

    async def seed():
        async with AsyncSessionLocal() as session:
            added = await ItemTypeService(session, current_user='cli').seed_defaults()
        typer.secho(f"{added} item type ditambahkan.", fg=typer.colors.GREEN)

    asyncio.run(seed())

# --- User Management Commands ---

@cli.command()
def create_user(
    username: Annotated[str, typer.Argument(help="Username untuk user baru.")],
    email: Annotated[str, typer.Argument(help="Email user (harus unik).")],
    password: Annotated[str, typer.Argument(help="Password user.")],
    role: Annotated[str, typer.Option(help="admin, operator, viewer atau wms.")] = 'admin',
    company_code: Annotated[Optional[int], typer.Option(help="Company code untuk user.")] = None
):
    """
    Membuat user baru (default role 'admin').
    """
    from imaps.database import AsyncSessionLocal
    from imaps.services.auth import UserService
    from imaps.services.exceptions import IMAPSException
    from pydantic import ValidationError as PydanticValidationError

    async def add_user():
        typer.echo(f"Mencoba membuat user '{username}'...")
        async with AsyncSessionLocal() as session:
            user_service = UserService(session, current_user='cli')
            try:
                new_user = await user_service.create({
                    'username': username,
                    'email': email,
                    'password': password,
                    'role': role,
                    'company_code': company_code,
                    'full_name': username.capitalize(),
                })
            except (IMAPSException, PydanticValidationError) as e:
                typer.secho(f"Gagal membuat user: {e}", fg=typer.colors.RED)
                raise typer.Exit(code=1)
        typer.secho(f"User '{new_user['username']}' berhasil dibuat!", fg=typer.colors.GREEN)

    asyncio.run(add_user())


# --- Server Commands ---

@cli.command()
def run(
    host: str = "127.0.0.1",
    port: int = 8000,
    reload: bool = True
):
    """
    Menjalankan development server Uvicorn.
    """
    typer.echo(f"Menjalankan server di http://{host}:{port}")
    uvicorn.run("main:app", host=host, port=port, reload=reload, factory=True)


if __name__ == "__main__":
    cli()
