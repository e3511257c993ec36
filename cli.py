#!/usr/bin/env python3
"""Interactive shell for migrating Google Docs to MediaWiki.

This tool authenticates against Google Drive, lets you list and search your
documents and their revisions, and migrates a document into a MediaWiki
site as wiki pages filed under a category.

Usage:
    python cli.py --username <client_id> --password <client_secret>
    python cli.py --authSub <access_token>

Available shell commands:
    list      - List documents by type, or the contents of a folder
    search    - Full text search
    asearch   - Advanced search with key=value parameters
    revisions - List the revisions of a document
    migrate   - Migrate a document to the wiki
    help      - Show help
    exit      - Leave the shell
"""
import sys
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TextIO

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from cli_utils import CommonCLI, create_base_parser
from config import Config, ConfigurationError
from errors import AuthenticationError, MigrationToolError
from google_docs import GoogleDocsClient
from migration import HTMLToWikiConverter, MigrationOrchestrator
from wiki_site import MediaWikiClient

logger = logging.getLogger(__name__)


# ============================================================================
# Messages
# ============================================================================

USAGE_MESSAGE = [
    "Usage: gdoc-migrate --username <client_id> --password <client_secret>",
    "Usage: gdoc-migrate --authSub <access_token>",
    "    [--host <host:port>]          Where is the Drive API (default = www.googleapis.com)",
    "    [--log]                       Enable logging of requests",
    "",
]

WELCOME_MESSAGE = [
    "",
    "This is a demo of the Google Docs migration!",
    "Using this interface, you can list and migrate your Google Docs.",
    "Type 'help' for a list of commands.",
    "",
]

COMMAND_HELP_MESSAGE = [
    "Commands:",
    "    list [object_type] [...]                  [[lists objects]]",
    "    search <search_text>                      [[full text search]]",
    "    asearch <query_param>=<value> [...]       [[advanced search]]",
    "    revisions <resource_id>                   [[lists revisions of a document]]",
    "    migrate <resource_id> [category]          [[migrate a document to the wiki]]",
    "",
    "    help [command]                            [[display this message, or info about"
    " the specified command]]",
    "    exit                                      [[exit the program]]",
]

COMMAND_HELP_LIST = [
    "list [object_type]",
    "    object_type: all, starred, documents, spreadsheets, pdfs, presentations, folders,"
    " trashed.",
    "        (defaults to 'all')",
    "list folder <folder_id>",
    "    folder_id: The id of the folder you want the contents list for.",
]

COMMAND_HELP_SEARCH = [
    "search <search_text>",
    "    search_text: A string to be used for a full text query",
]

COMMAND_HELP_ASEARCH = [
    "asearch [<query_param>=<value>] [<query_param2>=<value2>] ...",
    "    query_param: q, title, title-exact, opened-min, opened-max, edited-min, edited-max,",
    "        owner, writer, reader, showfolders, showdeleted",
    "    value: The value of the parameter",
]

COMMAND_HELP_REVISIONS = [
    "revisions <resource_id>",
    "    resource_id: document resource id or URL",
]

COMMAND_HELP_MIGRATE = [
    "migrate <resource_id> [category]",
    "    resource_id: document resource id or URL",
    "    category: wiki category to file the document under",
    "        (defaults to the document's folder, then to the default category)",
]

COMMAND_HELP_HELP = [
    "help [command]",
    "    command: The command to show help for",
]

COMMAND_HELP_EXIT = [
    "exit",
    "    Exit the program.",
]

COMMAND_HELP_ERROR = ["unknown command"]

HELP_MESSAGES = {
    "list": COMMAND_HELP_LIST,
    "search": COMMAND_HELP_SEARCH,
    "asearch": COMMAND_HELP_ASEARCH,
    "revisions": COMMAND_HELP_REVISIONS,
    "migrate": COMMAND_HELP_MIGRATE,
    "help": COMMAND_HELP_HELP,
    "exit": COMMAND_HELP_EXIT,
    "quit": COMMAND_HELP_EXIT,
}

UNKNOWN_COMMAND_MESSAGE = "Unknown command. Type 'help' for a list of commands."

EXIT_COMMANDS = {"exit", "quit"}


def get_help(args: List[str]) -> List[str]:
    """
    Get the help text for a "help" command.

    Args:
        args: Parsed command, args[0] is "help", args[1] the optional command

    Returns:
        Full command list, the help of one command, or the unknown command text
    """
    if len(args) == 2:
        return HELP_MESSAGES.get(args[1], COMMAND_HELP_ERROR)
    return COMMAND_HELP_MESSAGE


# ============================================================================
# Interactive shell
# ============================================================================

class MigrationShell:
    """Read commands and run them against the document service and the wiki."""

    def __init__(
        self,
        documents,
        migrator,
        out: Optional[TextIO] = None,
        prompt_out: Optional[TextIO] = None,
    ):
        """
        Initialize the shell.

        Args:
            documents: Document service (GoogleDocsClient or compatible)
            migrator: MigrationOrchestrator (or compatible)
            out: Stream for command output (default: stdout)
            prompt_out: Stream for the prompt (default: stderr)
        """
        self.documents = documents
        self.migrator = migrator
        self.out = out or sys.stdout
        self.prompt_out = prompt_out or sys.stderr

        self.commands: Dict[str, Callable[[List[str]], None]] = {
            "list": self.cmd_list,
            "search": self.cmd_search,
            "asearch": self.cmd_asearch,
            "revisions": self.cmd_revisions,
            "migrate": self.cmd_migrate,
            "help": self.cmd_help,
        }

    def run(self, stream: Optional[TextIO] = None) -> None:
        """Print the welcome message and run commands until exit or end of input."""
        stream = stream or sys.stdin
        self.print_message(WELCOME_MESSAGE)

        while True:
            self.prompt_out.write("Command: ")
            self.prompt_out.flush()

            line = stream.readline()
            if not line:
                break
            if not self.execute_command(line):
                break

    def execute_command(self, command: str) -> bool:
        """
        Run one command line.

        Returns:
            False if the user asked to exit, True otherwise
        """
        args = CommonCLI.parse_command(command)
        if not args:
            return True

        name = args[0]
        if name in EXIT_COMMANDS:
            return False

        handler = self.commands.get(name)
        if handler is None:
            print(UNKNOWN_COMMAND_MESSAGE, file=self.out)
            return True

        try:
            handler(args)
        except MigrationToolError as e:
            logger.error(f"Command '{name}' failed: {e}", exc_info=True)
            print(f"Command failed: {e}", file=self.out)

        return True

    # ------------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------------

    def cmd_list(self, args: List[str]) -> None:
        """list [object_type] | list folder <folder_id>"""
        if len(args) == 1:
            msg = "List of docs: "
            entries = self.documents.list_documents("all")
        elif len(args) == 2 and args[1] != "folder":
            msg = f"List of all {args[1]}: "
            try:
                entries = self.documents.list_documents(args[1])
            except ValueError as e:
                print(str(e), file=self.out)
                self.print_message(COMMAND_HELP_LIST)
                return
        elif len(args) == 3 and args[1] == "folder":
            msg = f"Contents of folder_id '{args[2]}': "
            entries = self.documents.list_folder(args[2])
        else:
            self.print_message(COMMAND_HELP_LIST)
            return

        print(msg, file=self.out)
        for entry in entries:
            self.print_document_entry(entry)

    def cmd_search(self, args: List[str]) -> None:
        """search <search_text>"""
        if len(args) != 2:
            self.print_message(COMMAND_HELP_SEARCH)
            return

        entries = self.documents.search({"q": args[1]})
        print(f"Results for [{args[1]}]", file=self.out)
        for entry in entries:
            self.print_document_entry(entry)

    def cmd_asearch(self, args: List[str]) -> None:
        """asearch <key=value> [<key=value> ...]"""
        if len(args) <= 1:
            self.print_message(COMMAND_HELP_ASEARCH)
            return

        try:
            params = CommonCLI.parse_query_params(args[1:])
        except ValueError as e:
            print(str(e), file=self.out)
            self.print_message(COMMAND_HELP_ASEARCH)
            return

        entries = self.documents.search(params)
        print("Results for advanced search:", file=self.out)
        for entry in entries:
            self.print_document_entry(entry)

    def cmd_revisions(self, args: List[str]) -> None:
        """revisions <resource_id>"""
        if len(args) != 2:
            self.print_message(COMMAND_HELP_REVISIONS)
            return

        revisions = self.documents.list_revisions(args[1])
        print("List of revisions...", file=self.out)
        for revision in revisions:
            self.print_revision_entry(revision)

    def cmd_migrate(self, args: List[str]) -> None:
        """migrate <resource_id> [category]"""
        if len(args) not in (2, 3):
            self.print_message(COMMAND_HELP_MIGRATE)
            return

        category = args[2] if len(args) == 3 else None
        result = self.migrator.migrate(args[1], category)
        print(
            f"The document \"{result['title']}\" is successfully migrated "
            f"under \"{result['category']}\"",
            file=self.out,
        )

    def cmd_help(self, args: List[str]) -> None:
        """help [command]"""
        self.print_message(get_help(args))

    # ------------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------------

    def print_document_entry(self, entry: Dict[str, Any]) -> None:
        """Print a document as ' -- <title> [<parent>] <id>'."""
        output = f" -- {entry['title']} "
        for parent in entry.get("parents", []):
            output += f"[{parent['title']}] "
        output += entry["id"]
        print(output, file=self.out)

    def print_revision_entry(self, revision: Dict[str, Any]) -> None:
        """Print a revision with its editor and link."""
        output = f" -- {revision['title']}, created on {revision['modified_time']} "
        output += f" by {revision['editor_name']} - {revision['editor_email']}\n"
        output += f"    {revision['link']}"
        print(output, file=self.out)

    def print_message(self, lines: List[str]) -> None:
        CommonCLI.print_message(lines, self.out)


# ============================================================================
# Main
# ============================================================================

def create_argument_parser():
    """Create the startup flag parser (--help is handled by main)."""
    parser = create_base_parser(
        "Migrate Google Docs to MediaWiki",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        '--username', '--user', '-u',
        dest='username',
        metavar='CLIENT_ID',
        help='OAuth2 client ID'
    )
    parser.add_argument(
        '--password', '--pass', '-p',
        dest='password',
        metavar='CLIENT_SECRET',
        help='OAuth2 client secret'
    )
    parser.add_argument(
        '--authSub', '--auth', '-a',
        dest='auth_sub',
        metavar='TOKEN',
        help='OAuth2 access token'
    )
    parser.add_argument(
        '--host', '-s',
        metavar='HOST',
        help='Drive API host (default: www.googleapis.com)'
    )
    parser.add_argument(
        '--log', '-l',
        action='store_true',
        help='Enable logging of requests'
    )
    parser.add_argument(
        '--help', '-h',
        action='store_true',
        help='Show usage and exit'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse flags, authenticate and run the interactive shell."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    has_login = bool(args.username) and bool(args.password)
    if args.help or not (has_login or args.auth_sub):
        CommonCLI.print_message(USAGE_MESSAGE)
        return 1

    CommonCLI.setup_logging(verbose=args.log, log_prefix='gdoc_migration', log_dir=Config.LOG_DIR)
    if args.log:
        CommonCLI.enable_request_logging()

    Config.check_env_file()
    try:
        Config.validate_all(['google', 'wiki'])
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    if args.log:
        Config.print_config_summary()

    documents = GoogleDocsClient(
        host=args.host or Config.GOOGLE_API_HOST,
        token_file=Config.GOOGLE_TOKEN_FILE,
        scopes=Config.GOOGLE_SCOPES,
    )
    try:
        if has_login:
            documents.login(args.username, args.password)
        else:
            documents.login_with_token(args.auth_sub)
    except AuthenticationError as e:
        logger.error(f"Authentication failed: {e}")
        print(f"Authentication failed: {e}")
        return 1

    wiki = MediaWikiClient(
        host=Config.WIKI_HOST,
        path=Config.WIKI_PATH,
        scheme=Config.WIKI_SCHEME,
        username=Config.WIKI_USERNAME or None,
        password=Config.WIKI_PASSWORD or None,
        user_agent=Config.WIKI_USER_AGENT,
    )
    migrator = MigrationOrchestrator(
        documents=documents,
        wiki=wiki,
        converter=HTMLToWikiConverter(),
        root_page=Config.WIKI_ROOT_PAGE,
        default_category=Config.WIKI_DEFAULT_CATEGORY,
        staging_dir=Config.STAGING_DIR,
        edit_summary=Config.WIKI_EDIT_SUMMARY,
    )

    try:
        with wiki:
            MigrationShell(documents, migrator).run(sys.stdin)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130

    return 0


if __name__ == '__main__':
    sys.exit(main())
