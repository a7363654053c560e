INVITATION_META_URL = "/api/rsvp/meta"
SUBMIT_RSVP_URL = "/api/rsvp"

ADMIN_LIST_RSVPS_URL = "/api/admin/rsvps"
ADMIN_APPROVE_RSVP_URL = "/api/admin/rsvps/approve"

ADMIN_CATEGORIES_URL = "/api/admin/categories"
ADMIN_DEFAULT_CATEGORY_URL = "/api/admin/categories/default"
ADMIN_CATEGORY_URL = "/api/admin/categories/{category_id}"
ADMIN_CATEGORY_RSVPS_URL = "/api/admin/categories/{category_id}/rsvps"
