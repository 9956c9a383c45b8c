# Log event names
SHORT_URL_CREATED = 'SHORT_URL_CREATED'
SHORT_URL_EXISTS = 'SHORT_URL_EXISTS'
SHORTEN_REJECTED = 'SHORTEN_REJECTED'
