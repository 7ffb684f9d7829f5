"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from home_inventory.adapters.openai_recognition_client import OpenAIRecognitionClient
from home_inventory.adapters.supabase_home_repository import SupabaseHomeRepository
from home_inventory.adapters.supabase_room_repository import SupabaseRoomRepository
from home_inventory.adapters.supabase_storage_gateway import SupabaseStorageGateway
from home_inventory.config import Settings
from home_inventory.services.analysis import AnalysisCoordinator, AnalysisTracker
from home_inventory.services.homes import HomeService
from home_inventory.services.recognition import RecognitionService
from home_inventory.services.rooms import RoomService
from home_inventory.services.storage import StorageGateway


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    storage_gateway: StorageGateway
    home_service: HomeService
    room_service: RoomService
    recognition_service: RecognitionService
    analysis_coordinator: AnalysisCoordinator
    analysis_tracker: AnalysisTracker
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    storage_gateway = SupabaseStorageGateway(
        client=supabase_client,
        bucket=resolved_settings.supabase_storage_bucket,
        supabase_url=resolved_settings.supabase_url,
    )
    room_service = RoomService(
        repository=SupabaseRoomRepository(supabase_client),
        storage=storage_gateway,
    )
    home_service = HomeService(
        repository=SupabaseHomeRepository(supabase_client),
        room_service=room_service,
        storage=storage_gateway,
    )
    openai_client = OpenAIRecognitionClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
    )
    recognition_service = RecognitionService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    analysis_tracker = AnalysisTracker()
    analysis_coordinator = AnalysisCoordinator(
        room_service=room_service,
        storage=storage_gateway,
        recognition_service=recognition_service,
        tracker=analysis_tracker,
        discard_orphaned_uploads=resolved_settings.discard_orphaned_uploads,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        storage_gateway=storage_gateway,
        home_service=home_service,
        room_service=room_service,
        recognition_service=recognition_service,
        analysis_coordinator=analysis_coordinator,
        analysis_tracker=analysis_tracker,
        close_resources=close_resources,
    )
