"""Configuration settings for Google Docs to MediaWiki migration."""
import os
import tempfile
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
# Use override=True to ensure .env values take precedence over shell environment
env_path = Path(__file__).parent / '.env'
if env_path.exists():
    load_dotenv(dotenv_path=env_path, override=True)
else:
    load_dotenv(override=True)


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


class Config:
    """Configuration class for Google Docs to MediaWiki migration."""

    # =========================================================================
    # GOOGLE DRIVE API SETTINGS (document service)
    # Credentials themselves come from the command line (--username/--password
    # or --authSub), only the endpoint, scopes and token cache are configured here.
    # =========================================================================

    GOOGLE_API_HOST = os.getenv('GOOGLE_API_HOST', 'www.googleapis.com').strip()
    GOOGLE_TOKEN_FILE = os.getenv('GOOGLE_TOKEN_FILE', './token.json')
    # Comma-separated list of OAuth scopes
    GOOGLE_SCOPES = [
        scope.strip()
        for scope in os.getenv(
            'GOOGLE_SCOPES', 'https://www.googleapis.com/auth/drive.readonly'
        ).split(',')
        if scope.strip()
    ]

    # =========================================================================
    # MEDIAWIKI SETTINGS (migration target)
    # =========================================================================

    WIKI_HOST = os.getenv('WIKI_HOST', 'localhost').strip()
    WIKI_PATH = os.getenv('WIKI_PATH', '/wiki/').strip()
    WIKI_SCHEME = os.getenv('WIKI_SCHEME', 'http').strip()
    WIKI_USERNAME = os.getenv('WIKI_USERNAME', '').strip()
    WIKI_PASSWORD = os.getenv('WIKI_PASSWORD', '').strip()
    WIKI_USER_AGENT = os.getenv('WIKI_USER_AGENT', 'GoogleDocMigration/1.0')

    # =========================================================================
    # MIGRATION SETTINGS
    # =========================================================================

    WIKI_ROOT_PAGE = os.getenv('WIKI_ROOT_PAGE', 'CloudHealth')
    WIKI_DEFAULT_CATEGORY = os.getenv('WIKI_DEFAULT_CATEGORY', 'Default')
    WIKI_EDIT_SUMMARY = os.getenv('WIKI_EDIT_SUMMARY', 'Migrated from Google Docs')

    STAGING_DIR = os.getenv('STAGING_DIR', tempfile.gettempdir())
    LOG_DIR = os.getenv('LOG_DIR', './logs')

    # =========================================================================
    # VALIDATION METHODS
    # =========================================================================

    @classmethod
    def validate_google(cls, raise_error: bool = True) -> bool:
        """
        Validate Google Drive API configuration.

        Args:
            raise_error: If True, raises ConfigurationError when invalid.
                        If False, returns False when invalid.

        Returns:
            True if valid, False otherwise (only if raise_error=False)

        Raises:
            ConfigurationError: If required settings are missing and raise_error=True
        """
        errors = []

        if not cls.GOOGLE_API_HOST:
            errors.append("GOOGLE_API_HOST must not be empty")
        if not cls.GOOGLE_TOKEN_FILE:
            errors.append("GOOGLE_TOKEN_FILE must not be empty")
        if not cls.GOOGLE_SCOPES:
            errors.append("GOOGLE_SCOPES must list at least one scope")

        if errors:
            if raise_error:
                error_msg = (
                    "Google Drive configuration is invalid:\n"
                    + "\n".join(f"  - {e}" for e in errors)
                    + "\n\nPlease check your .env file settings."
                )
                raise ConfigurationError(error_msg)
            return False

        return True

    @classmethod
    def validate_wiki(cls, raise_error: bool = True) -> bool:
        """
        Validate MediaWiki configuration.

        Args:
            raise_error: If True, raises ConfigurationError when invalid.
                        If False, returns False when invalid.

        Returns:
            True if valid, False otherwise (only if raise_error=False)

        Raises:
            ConfigurationError: If required settings are missing and raise_error=True
        """
        errors = []

        if not cls.WIKI_HOST:
            errors.append("WIKI_HOST is required")

        valid_schemes = ['http', 'https']
        if cls.WIKI_SCHEME not in valid_schemes:
            errors.append(
                f"WIKI_SCHEME must be one of {valid_schemes}, got '{cls.WIKI_SCHEME}'"
            )

        if cls.WIKI_USERNAME and not cls.WIKI_PASSWORD:
            errors.append("WIKI_PASSWORD is required when WIKI_USERNAME is set")

        if not cls.WIKI_ROOT_PAGE.strip():
            errors.append("WIKI_ROOT_PAGE must not be empty")

        if not cls.WIKI_DEFAULT_CATEGORY.strip():
            errors.append("WIKI_DEFAULT_CATEGORY must not be empty")

        if errors:
            if raise_error:
                error_msg = (
                    "MediaWiki configuration is incomplete:\n"
                    + "\n".join(f"  - {e}" for e in errors)
                    + "\n\nPlease set the required environment variables in your .env file."
                    + "\nSee env.example for reference."
                )
                raise ConfigurationError(error_msg)
            return False

        return True

    @classmethod
    def validate_all(cls, modules: list = None) -> bool:
        """
        Validate all required configuration based on modules being used.

        Args:
            modules: List of modules to validate. Valid values:
                    - 'google': Validate Google Drive config
                    - 'wiki': Validate MediaWiki config
                    If None, validates both

        Returns:
            True if all specified modules are valid

        Raises:
            ConfigurationError: If any required settings are missing

        Example:
            # Validate the wiki only
            Config.validate_all(['wiki'])
        """
        if modules is None:
            modules = ['google', 'wiki']

        all_valid = True

        if 'google' in modules:
            all_valid &= cls.validate_google(raise_error=True)

        if 'wiki' in modules:
            all_valid &= cls.validate_wiki(raise_error=True)

        return all_valid

    @classmethod
    def check_env_file(cls) -> bool:
        """
        Check if .env file exists and display helpful message if not.

        Returns:
            True if .env file exists, False otherwise
        """
        env_path = Path(__file__).parent / '.env'

        if not env_path.exists() and not Path('.env').exists():
            print("=" * 80)
            print("⚠️  WARNING: .env file not found")
            print("=" * 80)
            print()
            print("Wiki settings fall back to their defaults (http://localhost/wiki/).")
            print()
            print("Steps:")
            print("  1. Copy env.example to .env:")
            print("     cp env.example .env")
            print()
            print("  2. Edit .env and set the wiki host, path and bot credentials")
            print()
            print("=" * 80)
            return False

        return True

    @classmethod
    def print_config_summary(cls, hide_secrets: bool = True):
        """
        Print configuration summary for debugging.

        Args:
            hide_secrets: If True, masks sensitive information
        """
        def mask(value: str) -> str:
            """Mask sensitive values."""
            if not value or not hide_secrets:
                return value or '(not set)'
            if len(value) <= 4:
                return '***'
            return value[:4] + '***'

        print("=" * 80)
        print("Configuration Summary")
        print("=" * 80)
        print()
        print("Google Drive:")
        print(f"  API host:   {cls.GOOGLE_API_HOST}")
        print(f"  Token file: {cls.GOOGLE_TOKEN_FILE}")
        print(f"  Scopes:     {', '.join(cls.GOOGLE_SCOPES)}")
        print()
        print("MediaWiki:")
        print(f"  Endpoint:   {cls.WIKI_SCHEME}://{cls.WIKI_HOST}{cls.WIKI_PATH}")
        print(f"  Username:   {cls.WIKI_USERNAME or '(not set)'}")
        print(f"  Password:   {mask(cls.WIKI_PASSWORD)}")
        print(f"  Root page:  {cls.WIKI_ROOT_PAGE}")
        print(f"  Default:    {cls.WIKI_DEFAULT_CATEGORY}")
        print()
        print("Directories:")
        print(f"  Staging:    {cls.STAGING_DIR}")
        print(f"  Logs:       {cls.LOG_DIR}")
        print()
        print("=" * 80)
