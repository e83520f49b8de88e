"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ATTENDEE_ID_LENGTH = 20

MIN_NAME_LENGTH = 2
MIN_JOB_LENGTH = 2
MIN_AREA_LENGTH = 2
MIN_AGE = 1
MAX_AGE = 150
MIN_WHATSAPP_LENGTH = 8

DEFAULT_DB_TIMEOUT_SECONDS = 10
DEFAULT_QR_IMAGE_BASE_URL = "https://api.qrserver.com/v1/create-qr-code/"
DEFAULT_QR_IMAGE_SIZE = "250x250"

STORAGE_ERROR_MESSAGE = "A storage error occurred. Please try again."
REGISTRATION_STORAGE_ERROR_MESSAGE = "Could not save the registration. Please try again."
CHECKIN_STORAGE_ERROR_MESSAGE = "Could not complete the check-in. Please try again."
INVALID_CODE_MESSAGE = "Invalid QR code."
