"""
Constants and configuration values for the application scraping workflow.
"""

# Edit distance thresholds for fuzzy matching
LABEL_MAX_DISTANCE = 2
SUBURB_MAX_DISTANCE = 2
STREET_MAX_DISTANCE = 2
STATE_MAX_DISTANCE = 1

# OCR substitutions seen for the trailing "No" of the row label
LABEL_NUMBER_VARIANTS = ['n0', 'n°', '"o', '"0', '"°']

# Anchor words bounding the application number and description columns
MIDDLE_ANCHOR_WORDS = ['applicant', 'builder']

# Anchor above which the address line sits
ASSESSMENT_NUMBER_LABELS = ['Assessment Number', 'Asses Num']
ASSESSMENT_LABELS = ['Assessment', 'Asses']
NUMBER_LABELS = ['Number', 'Num']

# Record count printed on the first page of a report
RECORD_COUNT_LABELS = ['Records']

# Text found where an address is expected when the application has no address
NON_ADDRESS_PREFIXES = ('Dev Cost', 'LOT:', 'LOT ', 'HD:', 'HD ')

# Characters that OCR produces in place of the "/" of an application number
APPLICATION_NUMBER_SLASH_PATTERN = r'[IlL\[\]\|’,!]'

# Characters removed when condensing label text
CONDENSE_PATTERN = r'[\s.,\-_]'

LIGATURES = {
    'ﬁ': 'fi',
    'ﬂ': 'fl',
}

# Trailing postcode tokens dropped before the suburb lookup
POSTCODE_PATTERN = r'^[0-9]{4}$'
MALFORMED_POSTCODES = ('O', '0', 'D')
STATE_ABBREVIATION = 'SA'

# Maximum number of trailing tokens tried as a suburb name
MAX_SUBURB_TOKENS = 4

# Received dates are printed as D/MM/YYYY (leading zero of the day optional)
RECEIVED_DATE_PATTERN = r'^(\d{1,2})/(\d{2})/(\d{4})$'
DATE_OUTPUT_FORMAT = '%Y-%m-%d'

DEFAULT_DESCRIPTION = 'No description provided'

# Gazetteer file names
STREET_NAMES_FILE = 'streetnames.txt'
STREET_SUFFIXES_FILE = 'streetsuffixes.txt'
SUBURB_NAMES_FILE = 'suburbnames.txt'

# Selector for report links on the council listing page
PDF_LINK_SELECTOR = "td.uContentListDesc a[href$='.pdf']"
