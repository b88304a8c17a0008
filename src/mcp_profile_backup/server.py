import asyncio
import logging
import os
import sys
import tempfile
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

# FastMCP 2.0 import
from fastmcp import FastMCP

from .config import load_settings
from .diskcache_profile_store import DiskCacheProfileStore
from .events import EventRoute, route_to_tool_name
from .profile_info import get_username
from .service import ProfileBackupService
from .utils.session_utils import validate_session_id

logger = logging.getLogger("mcp_profile_backup")

SERVER_NAME = "Profile Backup"
STORE_DIR_ENV_VAR = "MCP_PROFILE_STORE_DIR"
LOG_LEVEL_ENV_VAR = "MCP_PROFILE_BACKUP_LOG_LEVEL"


def configure_logging() -> None:
    """Ensure logs are visible in the FastMCP subprocess even if no handlers configured."""
    level = getattr(logging, os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper(), logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)


def _register_event_tool(mcp: FastMCP, route: EventRoute) -> None:
    tool_name = route_to_tool_name(route.event.route)
    mcp.tool(
        name=tool_name,
        description=(
            f"Signal the '{route.event.name}' event ({route.event.route}) for a session. "
            "Returns the given output unchanged; the profile is backed up in the background."
        ),
    )(route.handler)


def _drain_on_shutdown(service: ProfileBackupService):
    @asynccontextmanager
    async def lifespan(_: FastMCP) -> AsyncIterator[dict]:
        yield {}

        # Shutdown: backups started by event tools finish before the loop closes
        await service.stop()
        logger.info("Profile backup server stopped")

    return lifespan


def build_server(service: ProfileBackupService) -> FastMCP:
    """Create the FastMCP app with one tool per registered event route.

    Pending backups are awaited when the server shuts down.
    """
    mcp = FastMCP(SERVER_NAME, lifespan=_drain_on_shutdown(service))

    for route in service.get_routes():
        _register_event_tool(mcp, route)

    @mcp.tool
    def inspect_profiles(session_id: str | None = None) -> str:
        """List live profiles (id and username), or one profile's identity.

        Args:
            session_id: Optional session ID to inspect a single profile
        """
        store = service.store
        if session_id is not None:
            session_id = validate_session_id(session_id)
            profile = store.get_profile(session_id)
            if profile is None:
                return f"No profile for session '{session_id}'."
            return f"{session_id}: {get_username(profile) or '<no username>'}"

        profile_ids = store.get_profile_ids()
        if not profile_ids:
            return "No profiles loaded."
        lines = [f"{pid}: {get_username(store.get_profile(pid)) or '<no username>'}" for pid in profile_ids]
        return "Profiles:\n" + "\n".join(lines)

    return mcp


def create_service() -> ProfileBackupService:
    """Load settings and open the profile store named by the environment."""
    settings = load_settings()
    store_dir = os.environ.get(STORE_DIR_ENV_VAR) or os.path.join(
        tempfile.gettempdir(), "mcp_profiles"
    )
    return ProfileBackupService(settings, DiskCacheProfileStore(cache_dir=store_dir))


# === MAIN ENTRY POINT ===
def main():
    """Main entry point: restore staged profiles, then serve."""
    configure_logging()
    logger.info("Starting profile backup server")

    service = create_service()
    # Restore must complete before any event can trigger a backup
    asyncio.run(service.start())
    mcp = build_server(service)
    try:
        mcp.run()
    finally:
        service.store.close()


if __name__ == "__main__":
    main()
