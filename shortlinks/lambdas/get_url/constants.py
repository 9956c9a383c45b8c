# Log event names
URL_RETRIEVED = 'URL_RETRIEVED'
GET_URL_REJECTED = 'GET_URL_REJECTED'
