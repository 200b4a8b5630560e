"""Project-wide constants and compiled regular expressions used by Apt-List-Parser.

These values define the default apt source-list locations, the accepted entry
type keywords and the small set of patterns used while parsing. The paths are
the stock Debian/Ubuntu locations and can be overridden per scan.
"""

from re import compile as re_compile

SOURCES_LIST = "/etc/apt/sources.list"
SOURCES_PARTS = "/etc/apt/sources.list.d"
LIST_SUFFIX = ".list"
BACKUP_SUFFIX = ".save"

BINARY_TYPE = "deb"
SOURCE_TYPE = "deb-src"
ENTRY_TYPES = {BINARY_TYPE: False, SOURCE_TYPE: True}

COMMENT_CHAR = "#"
OPTIONS_OPEN = "["
OPTIONS_CLOSE = "]"
QUOTE_CHAR = '"'
ESCAPE_CHAR = "\\"

COMMENT_LINE_RE = re_compile(r"^\s*#")
HTTP_SCHEME_RE = re_compile(r"^https?://")

DIST_DIR = "dists/"
POOL_DIR = "pool/"
