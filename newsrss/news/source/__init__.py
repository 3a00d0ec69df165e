from .registry import NewsSourceRegistry, news_source
from .sites import *
