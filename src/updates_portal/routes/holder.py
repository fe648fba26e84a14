"""Holder page routes: filtered update list, month/tag navigation and RSS."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import psycopg  # pylint: disable=import-error
from flask import (  # pylint: disable=import-error
    Blueprint,
    Response,
    abort,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)

from src.core.settings import Settings, load_settings

from ...dated_updates.filter_description import describe_filters
from ...dated_updates.filter_params import filter_query_params, parse_filter_params
from ...dated_updates.models import FilterDescriptor, Notice, UpdateSource
from ...dated_updates.month_index import extract_months
from ...dated_updates.navigation import (
    all_tags_link,
    date_filter_link,
    date_reset_link,
    tag_links,
)
from ...dated_updates.query_builder import build_update_query
from ..config import resolve_update_source
from ..db import (
    _db_connection,
    count_updates,
    fetch_holder,
    fetch_tag,
    fetch_update,
    fetch_update_tags,
    fetch_updates,
)
from ..feed import build_rss_feed
from ..paging import UpdatePage, clamp_page_size, clamp_start

bp = Blueprint("holder", __name__)
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HolderRequest:
    """Per-request inputs for the holder views."""

    settings: Settings
    source: UpdateSource
    current_link: str


def _holder_request() -> HolderRequest:
    settings = current_app.config.get("UPDATES_SETTINGS")
    if settings is None:
        settings = load_settings(read_env_file=False)
    source = current_app.config.get("UPDATE_SOURCE")
    if source is None:
        source = resolve_update_source(settings.update_source)
    return HolderRequest(
        settings=settings,
        source=source,
        current_link=request.full_path.rstrip("?"),
    )


def _flash_notices(notices: list[Notice]) -> None:
    for notice in notices:
        flash(notice.message, "warning")


def _holder_link(holder_id: int, *, external: bool = False) -> str:
    return url_for("holder.index", holder_id=holder_id, _external=external)


def _update_link(holder_id: int, update_id: int, *, external: bool = False) -> str:
    return url_for(
        "holder.update_detail",
        holder_id=holder_id,
        update_id=update_id,
        _external=external,
    )


def _load_holder_context(
    conn: psycopg.Connection,
    ctx: HolderRequest,
    holder_id: int,
    filters: FilterDescriptor,
) -> dict[str, Any]:
    holder = fetch_holder(conn, ctx.source, holder_id)
    if holder is None:
        logger.info("holder not found: id=%s", holder_id)
        abort(404)

    page_size = clamp_page_size(ctx.settings.page_size)
    start = clamp_start(request.args.get("start"))
    query = build_update_query(ctx.source, holder.id, filters)
    page = UpdatePage(
        items=fetch_updates(conn, query, "date_desc", limit=page_size, offset=start),
        total=count_updates(conn, query),
        start=start,
        page_size=page_size,
        base_link=ctx.current_link,
    )

    # Months follow the tag and date filters only.
    month_query = build_update_query(ctx.source, holder.id, filters.without_month())
    months = extract_months(
        fetch_updates(conn, month_query, "date_asc"),
        ctx.current_link,
        filters.year,
        filters.month,
    )

    current_tag = fetch_tag(conn, ctx.source, filters.tag_id) if filters.tag_id is not None else None
    tags = fetch_update_tags(conn, ctx.source, holder.id)
    description = describe_filters(
        filters,
        lambda tag_id: current_tag.name if current_tag and current_tag.id == tag_id else None,
        ctx.source.update_name,
    )
    return {
        "holder": holder,
        "page": page,
        "months": months,
        "tags": tag_links(tags, ctx.current_link),
        "all_tags_link": all_tags_link(ctx.current_link),
        "current_tag": current_tag,
        "filter_description": description,
    }


@bp.get("/holders/<int:holder_id>/")
def index(holder_id: int):
    """Render the filtered, paginated updates for a holder."""
    ctx = _holder_request()
    filters, notices = parse_filter_params(request.args)
    try:
        with _db_connection(connect_timeout=ctx.settings.db_connect_timeout) as conn:
            context = _load_holder_context(conn, ctx, holder_id, filters)
    except (psycopg.Error, RuntimeError) as exc:
        logger.warning("holder page unavailable: id=%s error=%s", holder_id, exc)
        abort(503)
    _flash_notices(notices)
    return render_template(
        "holder.html",
        filters=filters,
        update_name=ctx.source.update_name,
        rss_link=url_for("holder.rss", holder_id=holder_id),
        form_values=filter_query_params(filters),
        **context,
    )


@bp.get("/holders/<int:holder_id>/updates/<int:update_id>")
def update_detail(holder_id: int, update_id: int):
    """Render a single update."""
    ctx = _holder_request()
    try:
        with _db_connection(connect_timeout=ctx.settings.db_connect_timeout) as conn:
            holder = fetch_holder(conn, ctx.source, holder_id)
            query = build_update_query(ctx.source, holder_id, FilterDescriptor())
            record = fetch_update(conn, query, update_id) if holder is not None else None
    except (psycopg.Error, RuntimeError) as exc:
        logger.warning("update unavailable: id=%s error=%s", update_id, exc)
        abort(503)
    if record is None:
        abort(404)
    return render_template(
        "update.html",
        holder=holder,
        update=record,
        holder_link=_holder_link(holder_id),
        update_name=ctx.source.update_name,
    )


@bp.get("/holders/<int:holder_id>/rss")
def rss(holder_id: int):
    """Serve the most recently created updates as RSS.

    The feed covers the whole holder; request filters are not applied.
    """
    ctx = _holder_request()
    try:
        with _db_connection(connect_timeout=ctx.settings.db_connect_timeout) as conn:
            holder = fetch_holder(conn, ctx.source, holder_id)
            if holder is None:
                abort(404)
            query = build_update_query(ctx.source, holder.id, FilterDescriptor())
            records = fetch_updates(conn, query, "created_desc", limit=ctx.settings.rss_limit)
    except (psycopg.Error, RuntimeError) as exc:
        logger.warning("rss unavailable: id=%s error=%s", holder_id, exc)
        abort(503)
    body = build_rss_feed(
        records,
        title=holder.title,
        link=_holder_link(holder.id, external=True),
        entry_link=lambda record: _update_link(holder.id, record.id, external=True),
    )
    return Response(body, mimetype="application/rss+xml")


@bp.get("/holders/<int:holder_id>/date-filter")
def date_filter(holder_id: int):
    """Apply the date form: keep the tag, reset month and pagination."""
    filters, notices = parse_filter_params(request.args)
    _flash_notices(notices)
    return redirect(date_filter_link(_holder_link(holder_id, external=True), filters))


@bp.get("/holders/<int:holder_id>/date-reset")
def date_reset(holder_id: int):
    """Clear the date form, keeping only the tag."""
    filters, _ = parse_filter_params(request.args)
    return redirect(date_reset_link(_holder_link(holder_id, external=True), filters))
