"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from macro_sync.adapters.supabase_remote import SupabaseRemoteService
from macro_sync.app_logging import configure_logging
from macro_sync.config import Settings
from macro_sync.domain.sync import SyncDomain
from macro_sync.services.journal import MacroJournal
from macro_sync.services.store import JsonFileStore, LocalStore
from macro_sync.services.sync import FoodEntrySync, PlanSync, SyncCoordinator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: LocalStore
    remote: SupabaseRemoteService | None
    food_entry_sync: FoodEntrySync
    workout_plan_sync: PlanSync
    meal_plan_sync: PlanSync
    coordinator: SyncCoordinator
    journal: MacroJournal


def build_container(
    settings: Settings | None = None, store: LocalStore | None = None
) -> AppContainer:
    """Create the default dependency container.

    Without Supabase credentials no remote service is built; syncs then fail
    fast and the journal only writes locally.
    """
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    resolved_store = store or JsonFileStore(resolved_settings.cache_dir)
    remote = None
    if resolved_settings.remote_configured:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_key
        )
        remote = SupabaseRemoteService(
            supabase_client, owner_column=resolved_settings.owner_column
        )

    food_entry_sync = FoodEntrySync(
        remote=remote,
        store=resolved_store,
        cache_key=resolved_settings.macro_cache_key,
        window_days=resolved_settings.sync_window_days,
    )
    workout_plan_sync = PlanSync(
        remote=remote,
        store=resolved_store,
        cache_key=resolved_settings.workout_plans_cache_key,
        domain=SyncDomain.WORKOUT_PLANS,
    )
    meal_plan_sync = PlanSync(
        remote=remote,
        store=resolved_store,
        cache_key=resolved_settings.meal_plans_cache_key,
        domain=SyncDomain.MEAL_PLANS,
    )
    coordinator = SyncCoordinator(
        orchestrators=[food_entry_sync, workout_plan_sync, meal_plan_sync]
    )
    journal = MacroJournal(
        store=resolved_store,
        cache_key=resolved_settings.macro_cache_key,
        remote=remote,
        owner_column=resolved_settings.owner_column,
    )

    return AppContainer(
        settings=resolved_settings,
        store=resolved_store,
        remote=remote,
        food_entry_sync=food_entry_sync,
        workout_plan_sync=workout_plan_sync,
        meal_plan_sync=meal_plan_sync,
        coordinator=coordinator,
        journal=journal,
    )
