"""
# Contact-Form: constants.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Constants.
"""

GENERIC_ERROR_EXIT_CODE = 1
COMMAND_LINE_ERROR_EXIT_CODE = 2
CONFIGURATION_ERROR_EXIT_CODE = 3

KB_IN_BYTES = 1024
MB_IN_BYTES = 1024 * KB_IN_BYTES
GB_IN_BYTES = 1024 * MB_IN_BYTES

DEFAULT_UPLOAD_LIMIT = MB_IN_BYTES
ATTACHMENTS_TOTAL_SIZE_LIMIT = 25 * MB_IN_BYTES

SCHEMA_VERSION = 'Contact Form 7 SWV Schema 2022-10'
META_SCHEMA_URI = 'https://json-schema.org/draft/2020-12/schema'
META_SCHEMA_TITLE = 'Contact Form 7 SWV'
META_SCHEMA_DESCRIPTION = 'Contact Form 7 SWV meta-schema'

CONFIG_ERRORS_META_KEY = '_config_errors'
CONFIG_ERRORS_DOC_URL = 'https://contactform7.com/configuration-errors/'

EXAMPLE_EMAIL = 'example@example.com'
EXAMPLE_TEXT = 'example'
DEFAULT_LIST_ITEM_SEPARATOR = ', '

ERROR = 100
ERROR_MAYBE_EMPTY = 101
ERROR_INVALID_MAILBOX_SYNTAX = 102
ERROR_EMAIL_NOT_IN_SITE_DOMAIN = 103
ERROR_HTML_IN_MESSAGE = 104
ERROR_MULTIPLE_CONTROLS_IN_LABEL = 105
ERROR_FILE_NOT_FOUND = 106
ERROR_UNAVAILABLE_NAMES = 107
ERROR_INVALID_MAIL_HEADER = 108
ERROR_DEPRECATED_SETTINGS = 109
ERROR_FILE_NOT_IN_CONTENT_DIR = 110
ERROR_UNAVAILABLE_HTML_ELEMENTS = 111
ERROR_ATTACHMENTS_OVERWEIGHT = 112
ERROR_DOTS_IN_NAMES = 113
ERROR_COLONS_IN_NAMES = 114
ERROR_UPLOAD_FILESIZE_OVERLIMIT = 115

ERROR_SLUG_FROM_CODE = {
    ERROR: 'error',
    ERROR_MAYBE_EMPTY: 'maybe_empty',
    ERROR_INVALID_MAILBOX_SYNTAX: 'invalid_mailbox_syntax',
    ERROR_EMAIL_NOT_IN_SITE_DOMAIN: 'email_not_in_site_domain',
    ERROR_HTML_IN_MESSAGE: 'html_in_message',
    ERROR_MULTIPLE_CONTROLS_IN_LABEL: 'multiple_controls_in_label',
    ERROR_FILE_NOT_FOUND: 'file_not_found',
    ERROR_UNAVAILABLE_NAMES: 'unavailable_names',
    ERROR_INVALID_MAIL_HEADER: 'invalid_mail_header',
    ERROR_DEPRECATED_SETTINGS: 'deprecated_settings',
    ERROR_FILE_NOT_IN_CONTENT_DIR: 'file_not_in_content_dir',
    ERROR_UNAVAILABLE_HTML_ELEMENTS: 'unavailable_html_elements',
    ERROR_ATTACHMENTS_OVERWEIGHT: 'attachments_overweight',
    ERROR_DOTS_IN_NAMES: 'dots_in_names',
    ERROR_COLONS_IN_NAMES: 'colons_in_names',
    ERROR_UPLOAD_FILESIZE_OVERLIMIT: 'upload_filesize_overlimit',
}

DEFAULT_MESSAGE_FROM_ERROR_CODE = {
    ERROR_MAYBE_EMPTY: 'There is a possible empty field.',
    ERROR_INVALID_MAILBOX_SYNTAX: 'Invalid mailbox syntax is used.',
    ERROR_EMAIL_NOT_IN_SITE_DOMAIN: 'Sender email address does not belong to the site domain.',
    ERROR_HTML_IN_MESSAGE: 'HTML tags are used in a message.',
    ERROR_MULTIPLE_CONTROLS_IN_LABEL: 'Multiple form controls are in a single label element.',
    ERROR_INVALID_MAIL_HEADER: 'There are invalid mail header fields.',
    ERROR_DEPRECATED_SETTINGS: 'Deprecated settings are used.',
}

# Query variables of the host framework; form controls may not use them as names.
UNAVAILABLE_NAMES = (
    'm',
    'p',
    'posts',
    'w',
    'cat',
    'withcomments',
    'withoutcomments',
    's',
    'search',
    'exact',
    'sentence',
    'calendar',
    'page',
    'paged',
    'more',
    'tb',
    'pb',
    'author',
    'order',
    'orderby',
    'year',
    'monthnum',
    'day',
    'hour',
    'minute',
    'second',
    'name',
    'category_name',
    'tag',
    'feed',
    'author_name',
    'static',
    'pagename',
    'page_id',
    'error',
    'attachment',
    'attachment_id',
    'subpost',
    'subpost_id',
    'preview',
    'robots',
    'taxonomy',
    'term',
    'cpage',
    'post_type',
    'embed',
)

MAILBOX_HEADER_NAMES = ('reply-to', 'cc', 'bcc')

ALLOWED_URL_SCHEMES = (
    'http',
    'https',
    'ftp',
    'ftps',
    'mailto',
    'news',
    'irc',
    'irc6',
    'ircs',
    'gopher',
    'nntp',
    'feed',
    'telnet',
    'mms',
    'rtsp',
    'sms',
    'svn',
    'tel',
    'fax',
    'xmpp',
    'webcal',
    'urn',
)

RTL_LOCALES = (
    'ar',
    'ary',
    'azb',
    'ckb',
    'fa_IR',
    'haz',
    'he_IL',
    'ps',
    'sd_PK',
    'ug_CN',
    'ur',
)
