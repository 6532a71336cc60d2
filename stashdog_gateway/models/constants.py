"""Constants for the StashDog gateway.

This module centralizes default values shared by the interpreter, the
dispatcher and the data-access client.
"""


# Search defaults
DEFAULT_SEARCH_LIMIT = 20
DEFAULT_SEARCH_OFFSET = 0

# Custom fields
CUSTOM_FIELD_TYPE = "text"
RESERVED_FIELD_NAMES = frozenset({"notes", "tags", "tag", "description"})

# Columns requested from the backend
ITEM_COLUMNS = "id,name,description,tags,isStorage,isClassified,isFavorited,containerId,customFields,images"
COLLECTION_COLUMNS = "id,name,description,cover_image_url,visibility,user_id,created_at,updated_at,deleted_at"
TAG_COLUMNS = "id,name,usageCount,createdAt,updatedAt"
NOTIFICATION_COLUMNS = (
    "id,user_id,type,title,message,entity_id,entity_type,status,created_at,updated_at,is_deleted,metadata"
)
GROUP_COLUMNS = (
    "id,name,description,owner_id,organization_id,max_members,avatar_url,created_at,updated_at,deleted_at"
)
