# Log event names
CLEANUP_SUCCESS = 'CLEANUP_SUCCESS'
CLEANUP_FAILED = 'CLEANUP_FAILED'

CLEANUP_FAILED_MESSAGE = 'Failed to delete expired URLs.'
