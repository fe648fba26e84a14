"""Filtering, querying and navigation for dated updates under a holder."""

from .filter_description import describe_filters
from .filter_params import parse_filter_params
from .link_state import set_param, set_params
from .models import (
    FilterDescriptor,
    MonthBucket,
    MonthEntry,
    Notice,
    Tag,
    TagLink,
    UpdateRecord,
    UpdateSource,
)
from .month_index import extract_months
from .navigation import all_tags_link, date_filter_link, date_reset_link, tag_links
from .query_builder import UpdateQuery, build_tag_list_query, build_update_query

__all__ = [
    "FilterDescriptor",
    "MonthBucket",
    "MonthEntry",
    "Notice",
    "Tag",
    "TagLink",
    "UpdateQuery",
    "UpdateRecord",
    "UpdateSource",
    "all_tags_link",
    "build_tag_list_query",
    "build_update_query",
    "date_filter_link",
    "date_reset_link",
    "describe_filters",
    "extract_months",
    "parse_filter_params",
    "set_param",
    "set_params",
    "tag_links",
]
