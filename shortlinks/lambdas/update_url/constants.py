# Log event names
URL_UPDATED = 'URL_UPDATED'
UPDATE_URL_REJECTED = 'UPDATE_URL_REJECTED'

UPDATE_SUCCESS_MESSAGE = 'The URL was successfully updated.'
