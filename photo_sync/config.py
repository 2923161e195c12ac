"""
Configuration constants for the photo sync tool.
"""

# --- File Type Definitions ---
IMAGE_EXTS = {'.jpg', '.jpeg', '.png'}
VIDEO_EXTS = {'.mp4'}

# Extension to Type Mapping
# Keys are lowercase; lookups must lowercase the suffix first
EXT_TO_TYPE = {}
for ext in IMAGE_EXTS: EXT_TO_TYPE[ext] = 'image'
for ext in VIDEO_EXTS: EXT_TO_TYPE[ext] = 'video'

# --- Metadata Parsing ---
IMAGE_DATE_TAG = 'EXIF DateTimeOriginal'

# MediaInfo General track fields, in priority order
VIDEO_MEDIAINFO_FIELDS = ['encoded_date', 'tagged_date']
VIDEO_EXIFTOOL_FIELD = 'MediaCreateDate'

# --- Hashing ---
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading

# --- Organization ---
FOLDER_PATTERN = "{year}/{month}/{day}"
NAME_PATTERN = "{year}-{month}-{day}-{hour}.{minute}.{second}"
DISAMBIGUATOR_PATTERN = "({n})"

# Upper bound on numbered variants probed for a single file
MAX_COLLISIONS = 10_000
