from enum import Enum


class Permission(str, Enum):
    MANAGE_REPORTS = "manage_reports"
    MANAGE_USERS = "manage_users"
    MANAGE_LISTINGS = "manage_listings"
    MANAGE_STORES = "manage_stores"
    MANAGE_TICKETS = "manage_tickets"
    VIEW_ANALYTICS = "view_analytics"
    MANAGE_MODERATORS = "manage_moderators"
