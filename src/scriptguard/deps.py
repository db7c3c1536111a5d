"""Dependency injection singletons for Scriptguard."""

from scriptguard.common.config import get_settings
from scriptguard.common.database import DatabaseManager
from scriptguard.accounts.service import AccountService
from scriptguard.assets.fetcher import GitHubAssetFetcher
from scriptguard.executions.service import ExecutionService
from scriptguard.gate.composer import ScriptComposer
from scriptguard.gate.service import ValidationGate
from scriptguard.keys.service import KeyService
from scriptguard.projects.service import ProjectService

_db: DatabaseManager | None = None
_projects: ProjectService | None = None
_accounts: AccountService | None = None
_keys: KeyService | None = None
_executions: ExecutionService | None = None
_fetcher: GitHubAssetFetcher | None = None
_gate: ValidationGate | None = None
_composer: ScriptComposer | None = None


def get_db() -> DatabaseManager:
    global _db
    if _db is None:
        _db = DatabaseManager(get_settings())
    return _db


def get_project_service() -> ProjectService:
    global _projects
    if _projects is None:
        _projects = ProjectService()
    return _projects


def get_account_service() -> AccountService:
    global _accounts
    if _accounts is None:
        _accounts = AccountService(get_project_service())
    return _accounts


def get_key_service() -> KeyService:
    global _keys
    if _keys is None:
        _keys = KeyService()
    return _keys


def get_execution_service() -> ExecutionService:
    global _executions
    if _executions is None:
        _executions = ExecutionService()
    return _executions


def get_asset_fetcher() -> GitHubAssetFetcher:
    global _fetcher
    if _fetcher is None:
        settings = get_settings()
        _fetcher = GitHubAssetFetcher(
            base_url=settings.github_api_url,
            token=settings.github_token,
            timeout=settings.fetch_timeout,
        )
    return _fetcher


def get_validation_gate() -> ValidationGate:
    global _gate
    if _gate is None:
        _gate = ValidationGate(get_settings(), get_key_service())
    return _gate


def get_script_composer() -> ScriptComposer:
    global _composer
    if _composer is None:
        _composer = ScriptComposer(get_settings().script_brand)
    return _composer


def reset_singletons() -> None:
    """Reset all singletons (for testing)."""
    global _db, _projects, _accounts, _keys, _executions, _fetcher, _gate, _composer
    _db = None
    _projects = None
    _accounts = None
    _keys = None
    _executions = None
    _fetcher = None
    _gate = None
    _composer = None
