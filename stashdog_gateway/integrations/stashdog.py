"""StashDog backend integration.

Thin data-access client for the Supabase-hosted StashDog backend: PostgREST
tables under ``/rest/v1`` and edge functions (login, search, URL import)
under ``/functions/v1``.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import jwt
import requests

from stashdog_gateway import config
from stashdog_gateway.models.constants import (
    COLLECTION_COLUMNS,
    GROUP_COLUMNS,
    ITEM_COLUMNS,
    NOTIFICATION_COLUMNS,
    TAG_COLUMNS,
)
from stashdog_gateway.models.inventory import (
    Collection,
    CollectionItem,
    CustomField,
    Group,
    Item,
    ItemImage,
    Notification,
    SignInResult,
    Tag,
    UsageStats,
    UserProfile,
)
from stashdog_gateway.models.request import CustomFieldInput, Visibility
from stashdog_gateway.models.results import (
    ActionResult,
    CollectionListResult,
    CollectionResult,
    ImportResult,
    ItemResult,
    SearchResult,
    TagListResult,
    TagResult,
)

logger = logging.getLogger(__name__)

_CONTENT_RANGE_TOTAL_RE = re.compile(r"/(\d+)$")


class StashDogAPIError(Exception):
    """Backend request failed (transport error or non-2xx response)."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StashDogClient:
    """Client for the StashDog backend."""

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        auth_token: Optional[str] = None,
        anon_key: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """Initialize the client.

        Args:
            supabase_url: Project URL. If None, reads STASHDOG_SUPABASE_URL.
            auth_token: User access token. If None, reads STASHDOG_AUTH_TOKEN.
            anon_key: Project anon key. If None, reads STASHDOG_SUPABASE_ANON_KEY.
            timeout: Request timeout in seconds.
        """
        self.supabase_url = (supabase_url or config.STASHDOG_SUPABASE_URL).rstrip("/")
        self.auth_token = auth_token if auth_token is not None else config.STASHDOG_AUTH_TOKEN
        self.anon_key = anon_key if anon_key is not None else config.STASHDOG_SUPABASE_ANON_KEY
        self.timeout = timeout or config.STASHDOG_REQUEST_TIMEOUT_SEC

        self.rest_base_url = f"{self.supabase_url}/rest/v1"
        self.functions_url = f"{self.supabase_url}/functions/v1"

    # --- plumbing ------------------------------------------------------

    def set_auth_token(self, token: str) -> None:
        self.auth_token = token

    def clear_auth_token(self) -> None:
        self.auth_token = None

    def with_token(self, token: str) -> "StashDogClient":
        """Copy of this client bound to another access token."""
        return StashDogClient(
            supabase_url=self.supabase_url,
            auth_token=token,
            anon_key=self.anon_key,
            timeout=self.timeout,
        )

    def _build_headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if extra:
            headers.update(extra)
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        if self.anon_key:
            headers["apikey"] = self.anon_key
        return headers

    def _user_id_from_token(self) -> Optional[str]:
        """Read the ``sub`` claim of the access token (signature not verified)."""
        if not self.auth_token:
            return None
        try:
            payload = jwt.decode(self.auth_token, options={"verify_signature": False})
        except jwt.InvalidTokenError:
            return None
        return payload.get("sub")

    def _request_json(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Tuple[Any, requests.Response]:
        """Send a request and decode the JSON body.

        Raises:
            StashDogAPIError: If the request fails or returns a non-2xx status
        """
        try:
            response = requests.request(
                method,
                url,
                headers=self._build_headers(extra_headers),
                params=params,
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {type(e).__name__}: {str(e)}")
            raise StashDogAPIError(f"Request to StashDog failed: {e}") from e

        data: Any = None
        if response.text:
            try:
                data = response.json()
            except ValueError:
                data = response.text

        if not response.ok:
            message = None
            if isinstance(data, dict):
                message = data.get("message") or data.get("error_description") or data.get("error")
            message = message or response.reason or f"HTTP {response.status_code}"
            logger.error(f"{method} {url} returned {response.status_code}: {message}")
            raise StashDogAPIError(message, status_code=response.status_code)

        logger.debug(f"{method} {url} -> {response.status_code}")
        return data, response

    @staticmethod
    def _first(data: Any) -> Optional[Dict[str, Any]]:
        if isinstance(data, list) and data:
            return data[0]
        return None

    # --- record mapping ------------------------------------------------

    def _map_item(self, record: Dict[str, Any]) -> Item:
        images = []
        for image in record.get("images") or []:
            images.append(ItemImage(url=image) if isinstance(image, str) else ItemImage(
                id=image.get("id"),
                url=image.get("url"),
                path=image.get("path"),
                created_at=image.get("createdAt"),
                last_modified=image.get("lastModified"),
            ))
        return Item(
            id=record["id"],
            name=record.get("name") or "",
            notes=record.get("description") or None,
            tags=record.get("tags") or [],
            is_storage=bool(record.get("isStorage", False)),
            is_classified=bool(record.get("isClassified", False)),
            is_favorited=bool(record.get("isFavorited", False)),
            container_id=record.get("containerId"),
            images=images,
            custom_fields=[CustomField(**field) for field in record.get("customFields") or []],
        )

    def _map_collection(self, record: Dict[str, Any]) -> Collection:
        return Collection(
            id=record["id"],
            name=record.get("name") or "",
            description=record.get("description"),
            cover_image_url=record.get("cover_image_url"),
            visibility=(record.get("visibility") or "private").upper(),
            user_id=record.get("user_id"),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
        )

    def _map_tag(self, record: Dict[str, Any]) -> Tag:
        return Tag(
            id=record["id"],
            name=record.get("name") or "",
            usage_count=record.get("usageCount", record.get("usage_count")) or 0,
            created_at=record.get("createdAt") or record.get("created_at") or "",
            updated_at=record.get("updatedAt") or record.get("updated_at") or "",
        )

    # --- authentication ------------------------------------------------

    def sign_in(self, email: str, password: str) -> SignInResult:
        """Exchange email/password for an access token via the login edge function."""
        data, _ = self._request_json(
            "POST",
            f"{self.functions_url}/login_with_userpass",
            body={"email": email, "password": password},
        )
        data = data if isinstance(data, dict) else {}
        user = data.get("user") or {}
        return SignInResult(
            user_id=user.get("id") or data.get("userId"),
            email=user.get("email") or data.get("email"),
            display_name=user.get("displayName") or data.get("displayName"),
            access_token=data.get("accessToken") or data.get("access_token"),
        )

    # --- items ---------------------------------------------------------

    def get_item(self, item_id: str) -> ItemResult:
        data, _ = self._request_json(
            "GET",
            f"{self.rest_base_url}/items",
            params={"select": ITEM_COLUMNS, "id": f"eq.{item_id}"},
        )
        record = self._first(data)
        return ItemResult(item=self._map_item(record) if record else None)

    def get_items(
        self,
        search: Optional[str] = None,
        tags: Optional[List[str]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> SearchResult:
        """List items, newest first, with optional text and tag filters.

        The total count comes from the Content-Range header.
        """
        params: Dict[str, Any] = {"select": ITEM_COLUMNS, "order": "createdAt.desc"}
        query = (search or "").strip()
        if query:
            params["or"] = f"(name.ilike.*{query}*,description.ilike.*{query}*)"
        if tags:
            params["tags"] = f"cs.{{{','.join(tags)}}}"
        if limit is not None:
            params["limit"] = str(limit)
        if offset is not None:
            params["offset"] = str(offset)

        data, response = self._request_json(
            "GET",
            f"{self.rest_base_url}/items",
            params=params,
            extra_headers={"Prefer": "count=exact"},
        )
        records = data if isinstance(data, list) else []
        total_match = _CONTENT_RANGE_TOTAL_RE.search(response.headers.get("content-range", ""))
        total_count = int(total_match.group(1)) if total_match else len(records)
        return SearchResult(items=[self._map_item(r) for r in records], total_count=total_count)

    def search_items(
        self,
        search: Optional[str] = None,
        tags: Optional[List[str]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> SearchResult:
        """Full-text search through the search-items edge function."""
        body: Dict[str, Any] = {}
        if search:
            body["query"] = search
        if tags:
            body["tags"] = tags
        if limit is not None:
            body["limit"] = limit
        if offset is not None:
            body["offset"] = offset

        data, _ = self._request_json("POST", f"{self.functions_url}/search-items", body=body)
        data = data if isinstance(data, dict) else {}
        records = data.get("items") or []
        return SearchResult(
            items=[self._map_item(r) for r in records],
            total_count=data.get("totalCount") or len(records),
        )

    def add_item(
        self,
        name: str,
        notes: Optional[str] = None,
        tags: Optional[List[str]] = None,
        is_storage: bool = False,
        container_id: Optional[str] = None,
        custom_fields: Optional[List[CustomFieldInput]] = None,
        is_classified: bool = False,
    ) -> ItemResult:
        body = {
            "name": name,
            "description": notes or "",
            "tags": tags or [],
            "isStorage": is_storage,
            "containerId": container_id,
            "customFields": [f.model_dump() for f in custom_fields] if custom_fields else None,
            "isClassified": is_classified,
        }
        data, _ = self._request_json(
            "POST",
            f"{self.rest_base_url}/items",
            body=body,
            extra_headers={"Prefer": "return=representation"},
        )
        record = self._first(data)
        if record:
            logger.debug(f"Created item {record.get('id')}: {name[:50]}")
        return ItemResult(item=self._map_item(record) if record else None)

    def update_item(
        self,
        item_id: str,
        name: Optional[str] = None,
        notes: Optional[str] = None,
        tags: Optional[List[str]] = None,
        is_storage: Optional[bool] = None,
        container_id: Optional[str] = None,
        custom_fields: Optional[List[CustomFieldInput]] = None,
        is_classified: Optional[bool] = None,
        is_favorite: Optional[bool] = None,
    ) -> ItemResult:
        """Patch an item; only arguments that are not None are sent."""
        changes = {
            "name": name,
            "description": notes,
            "tags": tags,
            "isStorage": is_storage,
            "containerId": container_id,
            "customFields": [f.model_dump() for f in custom_fields] if custom_fields is not None else None,
            "isClassified": is_classified,
            "isFavorited": is_favorite,
        }
        body = {key: value for key, value in changes.items() if value is not None}

        data, _ = self._request_json(
            "PATCH",
            f"{self.rest_base_url}/items",
            params={"id": f"eq.{item_id}"},
            body=body,
            extra_headers={"Prefer": "return=representation"},
        )
        record = self._first(data)
        return ItemResult(item=self._map_item(record) if record else None)

    def delete_item(self, item_id: str) -> ActionResult:
        """Soft-delete an item."""
        self._request_json(
            "PATCH",
            f"{self.rest_base_url}/items",
            params={"id": f"eq.{item_id}"},
            body={"isDeleted": True},
            extra_headers={"Prefer": "return=representation"},
        )
        logger.debug(f"Soft-deleted item {item_id}")
        return ActionResult(success=True)

    def favorite_item(self, item_id: str) -> ItemResult:
        return self.update_item(item_id, is_favorite=True)

    def unfavorite_item(self, item_id: str) -> ItemResult:
        return self.update_item(item_id, is_favorite=False)

    def import_from_url(self, url: str) -> ImportResult:
        data, _ = self._request_json("POST", f"{self.functions_url}/import-from-url", body={"url": url})
        data = data if isinstance(data, dict) else {}
        item = data.get("item") or {}
        return ImportResult(
            id=data.get("id") or data.get("itemId") or item.get("id"),
            name=data.get("name") or item.get("name"),
        )

    # --- collections ---------------------------------------------------

    def get_collections(self, include_deleted: bool = False) -> CollectionListResult:
        params = {"select": COLLECTION_COLUMNS, "order": "created_at.desc"}
        if not include_deleted:
            params["deleted_at"] = "is.null"
        data, _ = self._request_json("GET", f"{self.rest_base_url}/collections", params=params)
        return CollectionListResult(collections=[self._map_collection(r) for r in data or []])

    def get_collection(self, collection_id: str) -> CollectionResult:
        data, _ = self._request_json(
            "GET",
            f"{self.rest_base_url}/collections",
            params={"select": COLLECTION_COLUMNS, "id": f"eq.{collection_id}"},
        )
        record = self._first(data)
        return CollectionResult(collection=self._map_collection(record) if record else None)

    def get_collection_items(self, collection_id: str) -> List[CollectionItem]:
        params = {
            "select": f"id,collection_id,item_id,position,added_at,added_by,item:items({ITEM_COLUMNS})",
            "collection_id": f"eq.{collection_id}",
        }
        data, _ = self._request_json("GET", f"{self.rest_base_url}/collection_items", params=params)
        return [
            CollectionItem(
                id=record["id"],
                collection_id=record["collection_id"],
                item_id=record["item_id"],
                position=record.get("position") or 0,
                added_at=record.get("added_at"),
                added_by=record.get("added_by"),
                item=self._map_item(record["item"]) if record.get("item") else None,
            )
            for record in data or []
        ]

    def create_collection(
        self,
        name: str,
        description: Optional[str] = None,
        cover_image_url: Optional[str] = None,
        visibility: Optional[Visibility] = None,
    ) -> CollectionResult:
        """Create a collection owned by the token's user (private by default)."""
        body = {
            "name": name,
            "description": description,
            "cover_image_url": cover_image_url,
            "visibility": Visibility(visibility).value.lower() if visibility else "private",
            "user_id": self._user_id_from_token(),
        }
        data, _ = self._request_json(
            "POST",
            f"{self.rest_base_url}/collections",
            body=body,
            extra_headers={"Prefer": "return=representation"},
        )
        record = self._first(data)
        if record:
            logger.debug(f"Created collection {record.get('id')}: {name[:50]}")
        return CollectionResult(collection=self._map_collection(record) if record else None)

    def update_collection(
        self,
        collection_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        cover_image_url: Optional[str] = None,
        visibility: Optional[Visibility] = None,
    ) -> CollectionResult:
        changes = {
            "name": name,
            "description": description,
            "cover_image_url": cover_image_url,
            "visibility": Visibility(visibility).value.lower() if visibility else None,
        }
        body = {key: value for key, value in changes.items() if value is not None}
        data, _ = self._request_json(
            "PATCH",
            f"{self.rest_base_url}/collections",
            params={"id": f"eq.{collection_id}"},
            body=body,
            extra_headers={"Prefer": "return=representation"},
        )
        record = self._first(data)
        return CollectionResult(collection=self._map_collection(record) if record else None)

    def delete_collection(self, collection_id: str) -> ActionResult:
        """Soft-delete a collection by stamping deleted_at."""
        self._request_json(
            "PATCH",
            f"{self.rest_base_url}/collections",
            params={"id": f"eq.{collection_id}"},
            body={"deleted_at": datetime.now(timezone.utc).isoformat()},
            extra_headers={"Prefer": "return=representation"},
        )
        logger.debug(f"Soft-deleted collection {collection_id}")
        return ActionResult(success=True)

    def add_items_to_collection(self, collection_id: str, item_ids: List[str]) -> ActionResult:
        """Append items; positions follow the order of item_ids."""
        added_by = self._user_id_from_token()
        body = [
            {"collection_id": collection_id, "item_id": item_id, "position": index, "added_by": added_by}
            for index, item_id in enumerate(item_ids)
        ]
        self._request_json(
            "POST",
            f"{self.rest_base_url}/collection_items",
            body=body,
            extra_headers={"Prefer": "return=representation"},
        )
        logger.debug(f"Added {len(item_ids)} items to collection {collection_id}")
        return ActionResult(success=True)

    def remove_items_from_collection(self, collection_id: str, item_ids: List[str]) -> ActionResult:
        self._request_json(
            "DELETE",
            f"{self.rest_base_url}/collection_items",
            params={"collection_id": f"eq.{collection_id}", "item_id": f"in.({','.join(item_ids)})"},
        )
        logger.debug(f"Removed {len(item_ids)} items from collection {collection_id}")
        return ActionResult(success=True)

    # --- tags ----------------------------------------------------------

    def get_all_tags(self) -> TagListResult:
        data, _ = self._request_json(
            "GET",
            f"{self.rest_base_url}/tags",
            params={"select": TAG_COLUMNS, "order": "usageCount.desc"},
        )
        return TagListResult(tags=[self._map_tag(r) for r in data or []])

    def search_tags(self, query: str) -> TagListResult:
        data, _ = self._request_json(
            "GET",
            f"{self.rest_base_url}/tags",
            params={"select": TAG_COLUMNS, "name": f"ilike.*{query}*", "order": "usageCount.desc"},
        )
        return TagListResult(tags=[self._map_tag(r) for r in data or []])

    def create_tag(self, name: str) -> TagResult:
        data, _ = self._request_json(
            "POST",
            f"{self.rest_base_url}/tags",
            body={"name": name, "userId": self._user_id_from_token()},
            extra_headers={"Prefer": "return=representation"},
        )
        record = self._first(data)
        return TagResult(tag=self._map_tag(record) if record else None)

    def rename_tag(self, tag_id: str, name: str) -> TagResult:
        data, _ = self._request_json(
            "PATCH",
            f"{self.rest_base_url}/tags",
            params={"id": f"eq.{tag_id}"},
            body={"name": name},
            extra_headers={"Prefer": "return=representation"},
        )
        record = self._first(data)
        return TagResult(tag=self._map_tag(record) if record else None)

    def delete_tag(self, tag_id: str) -> ActionResult:
        self._request_json("DELETE", f"{self.rest_base_url}/tags", params={"id": f"eq.{tag_id}"})
        return ActionResult(success=True)

    # --- account -------------------------------------------------------

    def get_usage_metrics(self) -> Optional[UsageStats]:
        data, _ = self._request_json(
            "GET",
            f"{self.rest_base_url}/user_usage_stats_read_model",
            params={"select": "item_count,collection_count,storage_used,shared_item_count"},
        )
        record = self._first(data)
        if not record:
            return None
        return UsageStats(**{key: value for key, value in record.items() if value is not None})

    def get_user(self, user_id: str) -> Optional[UserProfile]:
        data, _ = self._request_json(
            "GET",
            f"{self.rest_base_url}/users_read_model",
            params={
                "select": "id,email,displayName,createdAt,lastLoginAt,push_tokens",
                "id": f"eq.{user_id}",
            },
        )
        record = self._first(data)
        if not record:
            return None
        return UserProfile(
            id=record["id"],
            email=record.get("email"),
            display_name=record.get("displayName") or record.get("display_name"),
            created_at=record.get("createdAt") or record.get("created_at"),
            last_sign_in=record.get("lastLoginAt") or record.get("last_login_at"),
            push_tokens=record.get("push_tokens") or [],
        )

    def get_notifications(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Notification]:
        params: Dict[str, Any] = {"select": NOTIFICATION_COLUMNS, "order": "created_at.desc"}
        if status:
            params["status"] = f"eq.{status}"
        if limit is not None:
            params["limit"] = str(limit)
        if offset is not None:
            params["offset"] = str(offset)

        data, _ = self._request_json("GET", f"{self.rest_base_url}/notifications", params=params)
        return [
            Notification(
                id=record["id"],
                user_id=record.get("user_id"),
                type=record.get("type"),
                title=record.get("title"),
                message=record.get("message"),
                entity_id=record.get("entity_id"),
                entity_type=record.get("entity_type"),
                status=record.get("status"),
                created_at=record.get("created_at"),
                updated_at=record.get("updated_at"),
                is_deleted=bool(record.get("is_deleted", False)),
                metadata=record.get("metadata"),
            )
            for record in data or []
        ]

    def get_groups(self) -> List[Group]:
        data, _ = self._request_json(
            "GET",
            f"{self.rest_base_url}/groups",
            params={"select": GROUP_COLUMNS, "order": "created_at.desc"},
        )
        return [
            Group(**{field: record.get(field) for field in Group.model_fields if field in record})
            for record in data or []
        ]
