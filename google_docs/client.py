"""Google Drive client for listing, searching and downloading documents."""
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from errors import AuthenticationError, DownloadError, ServiceError
from . import queries

logger = logging.getLogger(__name__)

# Download formats accepted by download() and the MIME type requested for each
EXPORT_FORMATS = {
    "html": "text/html",
    "txt": "text/plain",
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "odt": "application/vnd.oasis.opendocument.text",
    "rtf": "application/rtf",
    "zip": "application/zip",
}

GOOGLE_APPS_PREFIX = "application/vnd.google-apps."
FILE_FIELDS = "id, name, mimeType, parents, modifiedTime"
REVISION_FIELDS = (
    "id, modifiedTime, lastModifyingUser(displayName, emailAddress), exportLinks"
)
DRIVE_FILE_URL = "https://drive.google.com/file/d/{}/view"


class GoogleDocsClient:
    """Client for the Google Drive v3 API, used as the document service."""

    DEFAULT_HOST = "www.googleapis.com"

    def __init__(
        self,
        host: Optional[str] = None,
        token_file: str = "./token.json",
        scopes: Optional[List[str]] = None,
        page_size: int = 100,
        drive_service=None,
    ):
        """
        Initialize Google Drive client.

        Args:
            host: API host (default: www.googleapis.com)
            token_file: Path to store/load the OAuth2 token
            scopes: List of Google API scopes to request
            page_size: Number of files requested per page
            drive_service: Pre-built Drive service (skips login, used by tests)
        """
        self.host = host or self.DEFAULT_HOST
        self.token_file = token_file
        self.scopes = scopes or ["https://www.googleapis.com/auth/drive.readonly"]
        self.page_size = page_size

        self.creds: Optional[Credentials] = None
        self.drive_service = drive_service
        self._root_folder_id: Optional[str] = None

        logger.info(f"Google Drive client initialized for host: {self.host}")

    # =========================================================================
    # Authentication
    # =========================================================================

    def login(self, client_id: str, client_secret: str) -> Dict[str, Any]:
        """
        Authenticate with an OAuth2 client id and secret.

        Args:
            client_id: OAuth2 client ID (--username)
            client_secret: OAuth2 client secret (--password)

        Returns:
            The authenticated user ({'displayName', 'emailAddress'})

        Raises:
            AuthenticationError: If authentication fails

        Process:
            1. Load the saved token if it was issued to the same client
            2. Refresh it if expired
            3. Otherwise run the OAuth2 flow (opens browser) and save the token
            4. Build the Drive service and verify the credentials
        """
        try:
            creds = self._load_saved_credentials(client_id)

            if not creds or not creds.valid:
                if creds and creds.expired and creds.refresh_token:
                    logger.info("Refreshing expired credentials...")
                    creds.refresh(Request())
                else:
                    logger.info("Running OAuth2 authentication flow...")
                    logger.info("A browser window will open for authentication")
                    flow = InstalledAppFlow.from_client_config(
                        self._client_config(client_id, client_secret), self.scopes
                    )
                    creds = flow.run_local_server(port=0)

                logger.info(f"Saving credentials to {self.token_file}")
                with open(self.token_file, "w") as token:
                    token.write(creds.to_json())

        except Exception as e:
            logger.error(f"Authentication failed: {e}")
            raise AuthenticationError(f"Authentication failed: {e}") from e

        return self._connect(creds)

    def login_with_token(self, token: str) -> Dict[str, Any]:
        """
        Authenticate with an existing OAuth2 access token (--authSub).

        Raises:
            AuthenticationError: If the token is rejected
        """
        if not token:
            raise AuthenticationError("Empty authorization token")

        logger.info("Authenticating with access token")
        return self._connect(Credentials(token=token))

    def _load_saved_credentials(self, client_id: str) -> Optional[Credentials]:
        """Load credentials saved by a previous login with the same client."""
        if not os.path.exists(self.token_file):
            return None

        logger.info(f"Loading saved credentials from {self.token_file}")
        try:
            creds = Credentials.from_authorized_user_file(self.token_file, self.scopes)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable token file {self.token_file}: {e}")
            return None

        if creds.client_id != client_id:
            logger.info("Saved token was issued to a different OAuth client, ignoring it")
            return None

        return creds

    @staticmethod
    def _client_config(client_id: str, client_secret: str) -> Dict[str, Any]:
        return {
            "installed": {
                "client_id": client_id,
                "client_secret": client_secret,
                "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                "token_uri": "https://oauth2.googleapis.com/token",
                "redirect_uris": ["http://localhost"],
            }
        }

    def _connect(self, creds: Credentials) -> Dict[str, Any]:
        """Build the Drive service and check the credentials with one call."""
        self.creds = creds
        logger.info("Building Google Drive service...")
        self.drive_service = build(
            "drive",
            "v3",
            credentials=creds,
            client_options={"api_endpoint": f"https://{self.host}/drive/v3/"},
            cache_discovery=False,
        )

        try:
            about = self._execute(
                self.drive_service.about().get(fields="user(displayName, emailAddress)"),
                "Verify credentials",
            )
        except ServiceError as e:
            raise AuthenticationError(f"Could not verify credentials: {e}") from e

        user = about.get("user", {})
        logger.info(f"✅ Authenticated as {user.get('emailAddress', 'unknown user')}")
        return user

    @property
    def service(self):
        """The Drive service; raises AuthenticationError before login."""
        if self.drive_service is None:
            raise AuthenticationError("Not authenticated, call login() first")
        return self.drive_service

    # =========================================================================
    # Listing and search
    # =========================================================================

    def list_documents(self, object_type: str = "all") -> List[Dict[str, Any]]:
        """
        List documents of one object type.

        Args:
            object_type: all, starred, documents, spreadsheets, presentations,
                pdfs, folders or trashed

        Raises:
            ValueError: If object_type is not supported
        """
        query = queries.build_list_query(object_type)
        logger.info(f"Listing {object_type}")
        return self._list_files(query, f"List {object_type}")

    def list_folder(self, folder_id: str) -> List[Dict[str, Any]]:
        """List the contents of a folder."""
        logger.info(f"Listing folder: {folder_id}")
        return self._list_files(
            queries.build_folder_query(folder_id), f"List folder {folder_id}"
        )

    def search(self, params: Dict[str, str]) -> List[Dict[str, Any]]:
        """
        Search documents.

        Args:
            params: Search parameters, see queries.build_search_query

        Returns:
            List of document entries
        """
        query = queries.build_search_query(params)
        logger.info(f"Searching with query: {query}")
        return self._list_files(query, "Search")

    def _list_files(self, query: str, action: str) -> List[Dict[str, Any]]:
        """Run a files.list query across all result pages."""
        list_args = {
            "q": query,
            "fields": f"nextPageToken, files({FILE_FIELDS})",
            "pageSize": self.page_size,
        }
        # Drive rejects orderBy on full text queries
        if "fullText" not in query:
            list_args["orderBy"] = "folder, modifiedTime desc"

        files = []
        page_token = None
        while True:
            response = self._execute(
                self.service.files().list(pageToken=page_token, **list_args), action
            )
            files.extend(response.get("files", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break

        logger.info(f"Retrieved {len(files)} files")

        parent_titles: Dict[str, Optional[str]] = {}
        return [self._to_entry(f, parent_titles) for f in files]

    # =========================================================================
    # Single document operations
    # =========================================================================

    def get_metadata(self, document_id: str) -> Dict[str, Any]:
        """
        Get a document's title and parent folders.

        Args:
            document_id: Drive file ID or document URL

        Returns:
            Document entry with 'id', 'title', 'mime_type', 'modified_time'
            and 'parents' (list of {'id', 'title'})
        """
        file_id = self._require_file_id(document_id)
        logger.debug(f"Fetching metadata for {file_id}")
        file_metadata = self._execute(
            self.service.files().get(fileId=file_id, fields=FILE_FIELDS),
            f"Get metadata of {file_id}",
        )
        return self._to_entry(file_metadata, {})

    def list_revisions(self, document_id: str) -> List[Dict[str, Any]]:
        """
        List the revisions of a document, oldest first.

        Returns:
            List of revision entries with 'id', 'title', 'modified_time',
            'editor_name', 'editor_email' and 'link'
        """
        file_id = self._require_file_id(document_id)
        logger.info(f"Listing revisions of {file_id}")

        revisions = []
        page_token = None
        while True:
            response = self._execute(
                self.service.revisions().list(
                    fileId=file_id,
                    fields=f"nextPageToken, revisions({REVISION_FIELDS})",
                    pageToken=page_token,
                ),
                f"List revisions of {file_id}",
            )
            revisions.extend(response.get("revisions", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break

        return [self._to_revision(file_id, r) for r in revisions]

    def download(
        self, document_id: str, destination: str, export_format: str = "html"
    ) -> str:
        """
        Download a document to a local file.

        Google Docs, Sheets and Slides are exported to the requested format,
        other files are downloaded as stored if they already have that format.

        Args:
            document_id: Drive file ID or document URL
            destination: Path of the file to write
            export_format: One of EXPORT_FORMATS keys

        Returns:
            Path of the written file

        Raises:
            DownloadError: If the id is invalid, the file cannot be exported
                or the destination cannot be written
        """
        file_id = self.extract_file_id(document_id)
        if not file_id:
            raise DownloadError(f"Invalid document id or URL: {document_id}")

        mime_type = EXPORT_FORMATS.get(export_format)
        if not mime_type:
            raise DownloadError(
                f"Unsupported format '{export_format}'. "
                f"Supported: {', '.join(EXPORT_FORMATS)}"
            )

        files = self.service.files()
        try:
            file_metadata = self._execute(
                files.get(fileId=file_id, fields="id, name, mimeType"),
                f"Get metadata of {file_id}",
            )
            source_type = file_metadata.get("mimeType", "")

            if source_type.startswith(GOOGLE_APPS_PREFIX):
                logger.info(f"Exporting {file_id} as {export_format}")
                request = files.export_media(fileId=file_id, mimeType=mime_type)
            elif source_type == mime_type:
                logger.info(f"Downloading {file_id}")
                request = files.get_media(fileId=file_id)
            else:
                raise DownloadError(
                    f"File {file_id} ({source_type}) cannot be downloaded as {export_format}"
                )

            content = self._execute(request, f"Download {file_id}")
        except ServiceError as e:
            raise DownloadError(f"Could not download {file_id}: {e}") from e

        output_path = Path(destination)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "wb") as f:
                f.write(content)
        except OSError as e:
            raise DownloadError(f"Could not write {output_path}: {e}") from e

        logger.info(f"✅ Saved {file_id} to {output_path}")
        return str(output_path)

    # =========================================================================
    # Helpers
    # =========================================================================

    def extract_file_id(self, url: str) -> Optional[str]:
        """
        Extract a Drive file ID from a URL.

        Args:
            url: Google Docs/Drive URL or raw file ID

        Returns:
            File ID if found, None otherwise

        Supported URL formats:
            - https://docs.google.com/document/d/{FILE_ID}/edit
            - https://docs.google.com/spreadsheets/d/{FILE_ID}
            - https://drive.google.com/file/d/{FILE_ID}/view
            - https://drive.google.com/open?id={FILE_ID}
            - {FILE_ID} (raw file ID)
        """
        url = (url or "").strip()

        pattern = (
            r"https://(?:docs|drive)\.google\.com/"
            r"(?:document|spreadsheets|presentation|file)/d/([a-zA-Z0-9-_]+)"
        )
        match = re.search(pattern, url)
        if match:
            file_id = match.group(1)
            logger.debug(f"Extracted file ID from URL: {file_id}")
            return file_id

        match = re.search(r"https://drive\.google\.com/open\?id=([a-zA-Z0-9-_]+)", url)
        if match:
            return match.group(1)

        # File IDs are alphanumeric with hyphens and underscores
        if re.match(r"^[a-zA-Z0-9-_]+$", url):
            return url

        logger.warning(f"Could not extract file ID from: {url}")
        return None

    def _require_file_id(self, document_id: str) -> str:
        file_id = self.extract_file_id(document_id)
        if not file_id:
            raise ServiceError(f"Invalid document id or URL: {document_id}")
        return file_id

    def _execute(self, request, action: str):
        """Execute an API request, translating failures to our errors."""
        try:
            return request.execute()
        except HttpError as e:
            status = e.resp.status
            if status == 401:
                raise AuthenticationError(f"{action}: credentials rejected (401)") from e
            if status == 404:
                raise ServiceError(f"{action}: not found (404)") from e
            if status == 403:
                raise ServiceError(f"{action}: permission denied (403)") from e
            raise ServiceError(f"{action}: Google API error: {e}") from e
        except RefreshError as e:
            raise AuthenticationError(f"{action}: could not refresh credentials: {e}") from e
        except (TransportError, OSError, httplib2.HttpLib2Error) as e:
            raise ServiceError(f"{action}: Google API unreachable: {e}") from e

    def _get_root_folder_id(self) -> str:
        """ID of the user's My Drive folder, which is not reported as a parent."""
        if self._root_folder_id is None:
            try:
                root = self._execute(
                    self.service.files().get(fileId="root", fields="id"),
                    "Get root folder",
                )
                self._root_folder_id = root.get("id", "")
            except ServiceError as e:
                logger.warning(f"Could not look up the root folder: {e}")
                self._root_folder_id = ""
        return self._root_folder_id

    def _resolve_parents(
        self, parent_ids: List[str], parent_titles: Dict[str, Optional[str]]
    ) -> List[Dict[str, str]]:
        """Look up parent folder titles, skipping My Drive and inaccessible folders."""
        root_id = self._get_root_folder_id()
        parents = []

        for parent_id in parent_ids:
            if parent_id == root_id:
                continue

            if parent_id not in parent_titles:
                try:
                    folder = self._execute(
                        self.service.files().get(fileId=parent_id, fields="id, name"),
                        f"Get folder {parent_id}",
                    )
                    parent_titles[parent_id] = folder.get("name")
                except ServiceError as e:
                    logger.warning(f"Skipping parent folder {parent_id}: {e}")
                    parent_titles[parent_id] = None

            if parent_titles[parent_id]:
                parents.append({"id": parent_id, "title": parent_titles[parent_id]})

        return parents

    def _to_entry(
        self, file_metadata: Dict[str, Any], parent_titles: Dict[str, Optional[str]]
    ) -> Dict[str, Any]:
        return {
            "id": file_metadata.get("id", ""),
            "title": file_metadata.get("name", "Untitled"),
            "mime_type": file_metadata.get("mimeType", ""),
            "modified_time": file_metadata.get("modifiedTime", ""),
            "parents": self._resolve_parents(
                file_metadata.get("parents", []), parent_titles
            ),
        }

    @staticmethod
    def _to_revision(file_id: str, revision: Dict[str, Any]) -> Dict[str, Any]:
        user = revision.get("lastModifyingUser", {})
        export_links = revision.get("exportLinks", {})
        return {
            "id": revision.get("id", ""),
            "title": f"Revision {revision.get('id', '?')}",
            "modified_time": revision.get("modifiedTime", ""),
            "editor_name": user.get("displayName", "unknown"),
            "editor_email": user.get("emailAddress", ""),
            "link": export_links.get("text/html") or DRIVE_FILE_URL.format(file_id),
        }
