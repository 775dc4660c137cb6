API_VERSION = '2009-09-19'
DATE_FORMAT = '%a, %d %b %Y %H:%M:%S GMT'
BLOB_HOST = 'https://{account}.blob.core.windows.net/'
SHARED_KEY_SCHEME = 'SharedKey'
MS_HEADER_PREFIX = 'x-ms-'
