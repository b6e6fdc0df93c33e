"""Convenience exports for service layer."""
from .auth_service import (
    authenticate_user,
    create_access_token,
    decode_access_token,
    get_current_user,
    register_user,
)
from .feed_service import (
    FeedEntry,
    build_entries,
    build_feed,
    can_view_profile,
    filter_feed,
    filter_feed_for_viewer,
    get_visible_post,
    require_profile_access,
    visible_authors,
)
from .post_service import (
    add_comment,
    create_post,
    delete_post,
    list_recent,
    list_saved_posts,
    save_post,
    toggle_like,
    unsave_post,
)
from .profile_service import get_profile, get_profiles, search_users, upsert_profile
from .relationship_service import (
    EdgeDirection,
    FollowStats,
    accept_request,
    follow_user,
    get_follow_stats,
    list_accepted,
    list_pending,
    outgoing_statuses,
    reject_request,
    repair_mutual_edges,
    status_between,
    suggestions,
    unfollow_user,
)

__all__ = [
    "authenticate_user",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "register_user",
    "FeedEntry",
    "build_entries",
    "build_feed",
    "can_view_profile",
    "filter_feed",
    "filter_feed_for_viewer",
    "get_visible_post",
    "require_profile_access",
    "visible_authors",
    "add_comment",
    "create_post",
    "delete_post",
    "list_recent",
    "list_saved_posts",
    "save_post",
    "toggle_like",
    "unsave_post",
    "get_profile",
    "get_profiles",
    "search_users",
    "upsert_profile",
    "EdgeDirection",
    "FollowStats",
    "accept_request",
    "follow_user",
    "get_follow_stats",
    "list_accepted",
    "list_pending",
    "outgoing_statuses",
    "reject_request",
    "repair_mutual_edges",
    "status_between",
    "suggestions",
    "unfollow_user",
]
