API_PREFIX = "/api/v1"

USERS_URL = f"{API_PREFIX}/users"
ME_URL = f"{API_PREFIX}/users/me"

EVENTS_URL = f"{API_PREFIX}/events"
EVENT_URL = f"{EVENTS_URL}/{{event_id}}"
EVENT_STATS_URL = f"{EVENT_URL}/stats"

GUESTS_URL = f"{EVENT_URL}/guests"
GUEST_URL = f"{GUESTS_URL}/{{guest_id}}"
GUEST_CONFIRMATION_URL = f"{GUEST_URL}/confirmation"
GUEST_CHECK_IN_URL = f"{GUEST_URL}/check-in"

PROMOTERS_URL = f"{EVENT_URL}/promoters"
PROMOTER_URL = f"{PROMOTERS_URL}/{{promoter_id}}"
PROMOTER_STATS_URL = f"{PROMOTER_URL}/stats"

PUBLIC_EVENT_URL = f"{API_PREFIX}/public/events/{{event_id}}"
PUBLIC_REGISTRATION_URL = f"{PUBLIC_EVENT_URL}/guests"
PROMOTER_INVITE_URL = f"{PUBLIC_EVENT_URL}/promoters"

CONFIRMATION_BY_TOKEN_URL = f"{API_PREFIX}/confirmations/token/{{token}}"
CONFIRM_BY_TOKEN_URL = f"{CONFIRMATION_BY_TOKEN_URL}/confirm"
DECLINE_BY_TOKEN_URL = f"{CONFIRMATION_BY_TOKEN_URL}/decline"
CONFIRMATION_BY_CODE_URL = f"{API_PREFIX}/confirmations/code/{{code}}"
CONFIRM_BY_CODE_URL = f"{CONFIRMATION_BY_CODE_URL}/confirm"
DECLINE_BY_CODE_URL = f"{CONFIRMATION_BY_CODE_URL}/decline"
