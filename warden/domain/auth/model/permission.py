"""Permission vocabulary: every ``resource.action`` token the admin knows about.

Permissions are opaque strings to the resolver. This module only defines the
known vocabulary (used to validate permission edits and the role registry)
and the parsing helpers shared by everything that handles tokens.
"""

from enum import StrEnum

from warden.domain.shared.error import InvalidPermissionFormat

WILDCARD = "*"
SEPARATOR = "."


class Resource(StrEnum):
    """Resources guarded by the admin."""

    PRODUCTS = "products"
    CATEGORIES = "categories"
    PAGES = "pages"
    MENU = "menu"
    MEDIA = "media"
    USERS = "users"
    SETTINGS = "settings"
    MESSAGES = "messages"
    COLLECTIONS = "collections"
    HOMEPAGE = "homepage"
    DASHBOARD = "dashboard"


class Permission(StrEnum):
    """Known permission tokens, including one wildcard per resource."""

    # Products
    PRODUCTS_VIEW = "products.view"
    PRODUCTS_CREATE = "products.create"
    PRODUCTS_EDIT = "products.edit"
    PRODUCTS_DELETE = "products.delete"
    PRODUCTS_PUBLISH = "products.publish"
    PRODUCTS_EXPORT = "products.export"
    PRODUCTS_ALL = "products.*"

    # Categories
    CATEGORIES_VIEW = "categories.view"
    CATEGORIES_CREATE = "categories.create"
    CATEGORIES_EDIT = "categories.edit"
    CATEGORIES_DELETE = "categories.delete"
    CATEGORIES_ALL = "categories.*"

    # Pages
    PAGES_VIEW = "pages.view"
    PAGES_CREATE = "pages.create"
    PAGES_EDIT = "pages.edit"
    PAGES_DELETE = "pages.delete"
    PAGES_PUBLISH = "pages.publish"
    PAGES_ALL = "pages.*"

    # Menu
    MENU_VIEW = "menu.view"
    MENU_CREATE = "menu.create"
    MENU_EDIT = "menu.edit"
    MENU_DELETE = "menu.delete"
    MENU_ALL = "menu.*"

    # Media
    MEDIA_VIEW = "media.view"
    MEDIA_UPLOAD = "media.upload"
    MEDIA_DELETE = "media.delete"
    MEDIA_ALL = "media.*"

    # Users
    USERS_VIEW = "users.view"
    USERS_CREATE = "users.create"
    USERS_EDIT = "users.edit"
    USERS_DELETE = "users.delete"
    USERS_MANAGE_ROLES = "users.manage_roles"
    USERS_EDIT_PERMISSIONS = "users.edit_permissions"
    USERS_ALL = "users.*"

    # Settings
    SETTINGS_VIEW = "settings.view"
    SETTINGS_EDIT = "settings.edit"
    SETTINGS_ALL = "settings.*"

    # Messages
    MESSAGES_VIEW = "messages.view"
    MESSAGES_REPLY = "messages.reply"
    MESSAGES_DELETE = "messages.delete"
    MESSAGES_ALL = "messages.*"

    # Collections
    COLLECTIONS_VIEW = "collections.view"
    COLLECTIONS_CREATE = "collections.create"
    COLLECTIONS_EDIT = "collections.edit"
    COLLECTIONS_DELETE = "collections.delete"
    COLLECTIONS_ALL = "collections.*"

    # Homepage CMS
    HOMEPAGE_VIEW = "homepage.view"
    HOMEPAGE_EDIT = "homepage.edit"
    HOMEPAGE_ALL = "homepage.*"

    # Dashboard widgets
    DASHBOARD_VIEW = "dashboard.view"
    DASHBOARD_MESSAGE_CENTER = "dashboard.message_center"
    DASHBOARD_ENGAGEMENT_OVERVIEW = "dashboard.engagement_overview"
    DASHBOARD_PRODUCT_INSIGHTS = "dashboard.product_insights"
    DASHBOARD_SEARCH_ANALYTICS = "dashboard.search_analytics"
    DASHBOARD_STATISTICS = "dashboard.statistics"
    DASHBOARD_RECENT_ACTIVITY = "dashboard.recent_activity"
    DASHBOARD_ALL = "dashboard.*"


PERMISSION_DESCRIPTIONS: dict[Permission, str] = {
    Permission.PRODUCTS_VIEW: "View products list and details",
    Permission.PRODUCTS_CREATE: "Create new products",
    Permission.PRODUCTS_EDIT: "Edit existing products",
    Permission.PRODUCTS_DELETE: "Delete products permanently",
    Permission.PRODUCTS_PUBLISH: "Publish or unpublish products",
    Permission.PRODUCTS_EXPORT: "Export the product catalogue",
    Permission.PRODUCTS_ALL: "All product permissions",
    Permission.CATEGORIES_VIEW: "View product categories",
    Permission.CATEGORIES_CREATE: "Create new categories",
    Permission.CATEGORIES_EDIT: "Edit existing categories",
    Permission.CATEGORIES_DELETE: "Delete categories",
    Permission.CATEGORIES_ALL: "All category permissions",
    Permission.PAGES_VIEW: "View CMS pages",
    Permission.PAGES_CREATE: "Create new pages",
    Permission.PAGES_EDIT: "Edit existing pages",
    Permission.PAGES_DELETE: "Delete pages",
    Permission.PAGES_PUBLISH: "Publish or unpublish pages",
    Permission.PAGES_ALL: "All page permissions",
    Permission.MENU_VIEW: "View menu items",
    Permission.MENU_CREATE: "Create new menu items",
    Permission.MENU_EDIT: "Edit menu items",
    Permission.MENU_DELETE: "Delete menu items",
    Permission.MENU_ALL: "All menu permissions",
    Permission.MEDIA_VIEW: "View media library",
    Permission.MEDIA_UPLOAD: "Upload new media files",
    Permission.MEDIA_DELETE: "Delete media files",
    Permission.MEDIA_ALL: "All media permissions",
    Permission.USERS_VIEW: "View user list",
    Permission.USERS_CREATE: "Create new users",
    Permission.USERS_EDIT: "Edit user accounts",
    Permission.USERS_DELETE: "Delete users",
    Permission.USERS_MANAGE_ROLES: "Assign and change user roles",
    Permission.USERS_EDIT_PERMISSIONS: "Edit individual user permissions",
    Permission.USERS_ALL: "All user management permissions",
    Permission.SETTINGS_VIEW: "View system settings",
    Permission.SETTINGS_EDIT: "Modify system settings",
    Permission.SETTINGS_ALL: "All settings permissions",
    Permission.MESSAGES_VIEW: "View customer messages",
    Permission.MESSAGES_REPLY: "Reply to customer messages",
    Permission.MESSAGES_DELETE: "Delete messages",
    Permission.MESSAGES_ALL: "All message permissions",
    Permission.COLLECTIONS_VIEW: "View product collections",
    Permission.COLLECTIONS_CREATE: "Create new collections",
    Permission.COLLECTIONS_EDIT: "Edit collections",
    Permission.COLLECTIONS_DELETE: "Delete collections",
    Permission.COLLECTIONS_ALL: "All collection permissions",
    Permission.HOMEPAGE_VIEW: "View homepage content and sections",
    Permission.HOMEPAGE_EDIT: "Edit homepage content and layout",
    Permission.HOMEPAGE_ALL: "All homepage CMS permissions",
    Permission.DASHBOARD_VIEW: "Access admin dashboard and overview",
    Permission.DASHBOARD_MESSAGE_CENTER: "View and manage message center on dashboard",
    Permission.DASHBOARD_ENGAGEMENT_OVERVIEW: "View engagement analytics and charts",
    Permission.DASHBOARD_PRODUCT_INSIGHTS: "View top products and performance insights",
    Permission.DASHBOARD_SEARCH_ANALYTICS: "View search analytics and trends",
    Permission.DASHBOARD_STATISTICS: "View statistics cards",
    Permission.DASHBOARD_RECENT_ACTIVITY: "View recent activity and products",
    Permission.DASHBOARD_ALL: "All dashboard permissions",
}


_KNOWN_TOKENS = frozenset(p.value for p in Permission)
_KNOWN_RESOURCES = frozenset(r.value for r in Resource)


def split_permission(value: str) -> tuple[str, str]:
    """Split a token into ``(resource, action)``.

    The resource is everything before the first separator, so
    ``"a.b.c"`` splits into ``("a", "b.c")``.

    Raises:
        InvalidPermissionFormat: empty token, no separator, or an empty part.
    """
    if not isinstance(value, str) or SEPARATOR not in value:
        raise InvalidPermissionFormat(str(value))
    resource, action = value.split(SEPARATOR, 1)
    if not resource or not action:
        raise InvalidPermissionFormat(value)
    return resource, action


def wildcard_for(resource: str) -> str:
    """Wildcard token granting every action on ``resource``."""
    return f"{resource}{SEPARATOR}{WILDCARD}"


def is_known_permission(value: str) -> bool:
    """True for vocabulary tokens and for wildcards on a known resource."""
    if value in _KNOWN_TOKENS:
        return True
    resource, action = split_permission(value)
    return action == WILDCARD and resource in _KNOWN_RESOURCES
