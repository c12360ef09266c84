DRAW_TYPE_DAILY = "DAILY"
DRAW_TYPE_WEEKLY = "WEEKLY"
DRAW_TYPE_SATURDAY_ALIAS = "SATURDAY"
DRAW_TYPES = (DRAW_TYPE_DAILY, DRAW_TYPE_WEEKLY)

DRAW_STATUS_SCHEDULED = "SCHEDULED"
DRAW_STATUS_EXECUTING = "EXECUTING"
DRAW_STATUS_COMPLETED = "COMPLETED"
DRAW_STATUS_FAILED = "FAILED"
DRAW_STATUSES = (
    DRAW_STATUS_SCHEDULED,
    DRAW_STATUS_EXECUTING,
    DRAW_STATUS_COMPLETED,
    DRAW_STATUS_FAILED,
)

JACKPOT_VALIDATION_PENDING = "PENDING"
JACKPOT_VALIDATION_VALID = "VALID"
JACKPOT_VALIDATION_INVALID_NOT_OPTED_IN = "INVALID_NOT_OPTED_IN"
JACKPOT_VALIDATION_NO_PARTICIPANTS = "NO_PARTICIPANTS"

PRIZE_CATEGORY_JACKPOT = "JACKPOT"

CLAIM_STATUS_PENDING = "PENDING"
CLAIM_STATUS_PROCESSING = "PROCESSING"
CLAIM_STATUS_PAID = "PAID"
CLAIM_STATUS_FAILED = "FAILED"
CLAIM_STATUS_INELIGIBLE = "INELIGIBLE"
CLAIM_STATUSES = (
    CLAIM_STATUS_PENDING,
    CLAIM_STATUS_PROCESSING,
    CLAIM_STATUS_PAID,
    CLAIM_STATUS_FAILED,
    CLAIM_STATUS_INELIGIBLE,
)

ROLLOVER_REASON_INVALID_NOT_OPTED_IN = "INVALID_NOT_OPTED_IN"
FAILURE_REASON_TIMEOUT = "TIMEOUT"

CONFIG_KEY_PRIZE_STRUCTURE_PREFIX = "prize_structure_"
CONFIG_KEY_BASE_JACKPOT_PREFIX = "base_jackpot_"

SATURDAY_WEEKDAY = 5
SUNDAY_WEEKDAY = 6
WEEKLY_WINDOW_DAYS = 7

DUE_DRAWS_BATCH_SIZE = 20
JACKPOT_HISTORY_MAX_LIMIT = 100
