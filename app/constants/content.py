"""Post (content record) constants shared by the services and routes."""

# Module tag stored on translation and media rows owned by a post
POST_MODULE = 'post'

# Fields whose value may be overridden per language
TRANSLATABLE_FIELDS = ('title', 'description')

# Single-file upload slots -> storage folder. The stored URL becomes the
# post column of the same name.
FILE_SLOTS = {
    'video': 'posts/videos',
    'audio': 'posts/audios',
    'image': 'posts/images',
    'pdf': 'posts/pdfs',
}

# Gallery uploads (any number) are stored as media rows
GALLERY_FIELD = 'images'
GALLERY_FOLDER = 'posts/images'

# Non-translatable base columns a draft may set
BASE_FIELDS = ('url', 'date', 'time')

FEATURED_LIMIT = 10
CATEGORY_POSTS_LIMIT = 1000
DEFAULT_PAGE_SIZE = 10
