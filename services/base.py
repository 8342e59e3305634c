"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject mock services for testing.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config is ignored
            for database access.
        storage: Optional key-value store. Defaults to SQLite storage via db_manager.
        delivery: Optional export delivery. Defaults to writing into config.export_dir.
    """

    def __init__(self, config: Config, db_manager=None, storage=None, delivery=None):
        """Initialize services with configuration.

        Args:
            config: Config object containing application configuration.
            db_manager: Optional database manager for dependency injection (testing).
                       If None, creates DatabaseManager from config.
            storage: Optional key-value store for dependency injection (testing).
            delivery: Optional export delivery for dependency injection (testing).
        """
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.exports import ExportService, FileDelivery
        from services.hydration import HydrationGate
        from services.ledger import LedgerService
        from services.settings import SettingsService
        from services.storage import SqliteKeyValueStore

        self.storage = storage or SqliteKeyValueStore(self.db_manager)
        self.gate = HydrationGate()
        self.ledger = LedgerService(self.storage, self.gate)
        self.settings = SettingsService(self.storage, config.default_currency)
        self.exports = ExportService(delivery or FileDelivery(config.export_dir))
