"""Common CLI utilities for the migration shell.

This module provides shared logging setup, command tokenization and message
printing used by the interactive shell in cli.py.
"""
import argparse
import logging
import sys
from typing import Dict, List, Optional, TextIO


# Commands whose last argument is free text and must not be split further.
# The value is the maximum number of splits (see str.split).
FREE_TEXT_COMMANDS = {
    'search': 1,
    'migrate': 2,
}

# Loggers of the HTTP libraries underneath the Drive and MediaWiki clients
REQUEST_LOGGERS = [
    'googleapiclient.discovery',
    'googleapiclient.http',
    'mwclient',
    'urllib3',
]


class CommonCLI:
    """Common CLI helpers for the migration shell."""

    @staticmethod
    def parse_command(command: str) -> List[str]:
        """
        Parse a command line entered by the user into individual arguments.

        Args:
            command: The entire command entered by the user

        Returns:
            List of arguments, first element is the command name.
            Empty list for a blank line.

        Example:
            >>> parse_command('search quarterly report')
            ['search', 'quarterly report']
            >>> parse_command('migrate abc123 Human Resources')
            ['migrate', 'abc123', 'Human Resources']
        """
        command = command.strip()
        if not command:
            return []

        name = command.split(None, 1)[0]
        maxsplit = FREE_TEXT_COMMANDS.get(name, -1)
        return command.split(None, maxsplit)

    @staticmethod
    def parse_query_params(param_args: List[str]) -> Dict[str, str]:
        """
        Parse advanced search arguments into a dictionary.

        Args:
            param_args: List of strings in "key=value" format

        Returns:
            Dictionary mapping parameter names to values

        Raises:
            ValueError: If an argument has no '=' or an empty key

        Example:
            >>> parse_query_params(['title=Budget', 'owner=me@example.com'])
            {'title': 'Budget', 'owner': 'me@example.com'}
        """
        params = {}
        for arg in param_args:
            if '=' not in arg:
                raise ValueError(f"Invalid query parameter (expected 'key=value'): {arg}")
            key, value = arg.split('=', 1)
            if not key.strip():
                raise ValueError(f"Invalid query parameter (empty key): {arg}")
            params[key.strip()] = value.strip()

        return params

    @staticmethod
    def print_message(lines: List[str], out: Optional[TextIO] = None) -> None:
        """Print each line of a message."""
        out = out or sys.stdout
        for line in lines:
            print(line, file=out)

    @staticmethod
    def setup_logging(
        verbose: bool = False,
        quiet: bool = False,
        log_prefix: str = 'migration',
        log_dir: str = './logs',
    ) -> None:
        """
        Setup logging configuration based on verbosity flags.

        The console only shows warnings and errors unless verbose is set,
        since the interactive shell writes its own output to stdout.

        Args:
            verbose: Enable DEBUG level logging on console and in the log file
            quiet: Only log errors
            log_prefix: Prefix for log filename (e.g., 'gdoc_migration')
            log_dir: Directory for log files
        """
        from pathlib import Path
        from datetime import datetime

        if quiet:
            file_level = console_level = logging.ERROR
        elif verbose:
            file_level = console_level = logging.DEBUG
        else:
            file_level = logging.INFO
            console_level = logging.WARNING

        # Create logs directory
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        # Create log file path with timestamp
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        log_file = log_path / f'{log_prefix}_{timestamp}.log'

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(file_level)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)

        # Configure logging to both file and console
        logging.basicConfig(
            level=min(file_level, console_level),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[file_handler, console_handler]
        )

        # Log the file location
        logging.getLogger(__name__).info(f"Logging to: {log_file}")

    @staticmethod
    def enable_request_logging() -> None:
        """Log every request made by the Drive and MediaWiki clients."""
        for name in REQUEST_LOGGERS:
            logging.getLogger(name).setLevel(logging.DEBUG)
        logging.getLogger(__name__).debug(
            f"Request logging enabled for: {', '.join(REQUEST_LOGGERS)}"
        )


def create_base_parser(description: str, **kwargs) -> argparse.ArgumentParser:
    """
    Create a base argument parser with common settings.

    Args:
        description: Description of the command
        **kwargs: Extra ArgumentParser options (e.g. add_help=False)

    Returns:
        Configured ArgumentParser instance

    Example:
        >>> parser = create_base_parser("Migrate Google Docs to MediaWiki")
        >>> parser.add_argument('--custom', help='Custom argument')
    """
    parser = argparse.ArgumentParser(
        description=description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        **kwargs
    )
    return parser
