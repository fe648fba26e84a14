import importlib
import unittest
from datetime import datetime
from unittest.mock import patch

from flask import Flask

from _test_utils import add_src_to_path

add_src_to_path()

app_module = importlib.import_module("src.updates_portal.app")
holder_routes = importlib.import_module("src.updates_portal.routes.holder")
routes = importlib.import_module("src.updates_portal.routes")
db = importlib.import_module("src.updates_portal.db")
models = importlib.import_module("src.dated_updates.models")
settings_module = importlib.import_module("src.core.settings")


class DummyContext:
    def __init__(self, value=None):
        self.value = value

    def __enter__(self):
        return self.value

    def __exit__(self, exc_type, exc, tb):
        return False


def _record(record_id, title, when, tag_ids=()):
    return models.UpdateRecord(
        id=record_id,
        parent_id=1,
        date=when,
        created=when,
        title=title,
        tag_ids=frozenset(tag_ids),
    )


RECORDS_DESC = [
    _record(3, "June news", datetime(2020, 6, 5), (3,)),
    _record(2, "May news", datetime(2020, 5, 20), (3,)),
    _record(1, "Old news", datetime(2019, 12, 1)),
]
HOLDER = db.Holder(id=1, title="Community Updates", url_segment="community")
HEALTH = models.Tag(3, "Health")


def _make_app(rss_limit=20):
    app = Flask(__name__, template_folder=app_module.TEMPLATE_DIR)
    app.secret_key = "test"
    app.config["UPDATES_SETTINGS"] = settings_module.Settings(
        database_url="postgresql://test",
        update_source="updates",
        page_size=20,
        rss_limit=rss_limit,
        db_connect_timeout=1,
    )
    app.config["UPDATE_SOURCE"] = models.UpdateSource()
    routes.register_blueprints(app)
    return app


def _fetch_updates(conn, query, order, *, limit=None, offset=0):
    if order == "date_asc":
        return list(reversed(RECORDS_DESC))
    return list(RECORDS_DESC)


class HolderRouteTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.app = _make_app()
        self.client = self.app.test_client()
        patchers = [
            patch.object(holder_routes, "_db_connection", side_effect=lambda **_: DummyContext()),
            patch.object(holder_routes, "fetch_holder", return_value=HOLDER),
            patch.object(holder_routes, "fetch_updates", side_effect=_fetch_updates),
            patch.object(holder_routes, "count_updates", return_value=len(RECORDS_DESC)),
            patch.object(holder_routes, "fetch_update_tags", return_value=[HEALTH]),
            patch.object(holder_routes, "fetch_tag", return_value=HEALTH),
            patch.object(holder_routes, "fetch_update", return_value=RECORDS_DESC[0]),
        ]
        self.mocks = {}
        for patcher in patchers:
            mock = patcher.start()
            self.addCleanup(patcher.stop)
            self.mocks[patcher.attribute] = mock


class TestHolderIndex(HolderRouteTestCase):
    def test_renders_updates_and_navigation(self) -> None:
        resp = self.client.get("/holders/1/")
        self.assertEqual(resp.status_code, 200)
        body = resp.get_data(as_text=True)
        self.assertIn("Community Updates", body)
        self.assertIn("June news", body)
        self.assertIn('href="/holders/1/?tag=3"', body)
        self.assertIn('href="/holders/1/?month=6&amp;year=2020"', body)
        self.assertIn("<strong>2020</strong>", body)
        self.assertIn("<strong>2019</strong>", body)
        self.assertIn('href="/holders/1/rss"', body)
        self.assertNotIn("filter-description", body)

    def test_reversed_dates_notice_and_description(self) -> None:
        resp = self.client.get("/holders/1/?from=2020-06-10&to=2020-06-01&tag=3")
        self.assertEqual(resp.status_code, 200)
        body = resp.get_data(as_text=True)
        self.assertEqual(
            body.count("Filter has been applied with the dates reversed."), 1
        )
        self.assertIn(
            "Updates within &#34;Health&#34; between 1/06/2020 and 10/06/2020", body
        )
        self.assertIn('value="2020-06-01"', body)
        self.assertIn('value="2020-06-10"', body)

    def test_month_filter_marks_active_month(self) -> None:
        resp = self.client.get("/holders/1/?month=6&year=2020")
        body = resp.get_data(as_text=True)
        self.assertIn('<a href="/holders/1/" class="active">Jun</a>', body)
        self.assertIn("Updates in June 2020", body)

    def test_month_list_ignores_month_filter(self) -> None:
        self.client.get("/holders/1/?month=6&year=2020&tag=3")
        calls = self.mocks["fetch_updates"].call_args_list
        month_call = [c for c in calls if c.args[2] == "date_asc"][0]
        month_query = month_call.args[1]
        self.assertEqual(
            [type(clause).__name__ for clause in month_query.clauses],
            ["ParentClause", "TagClause"],
        )

    def test_paging_uses_start_offset(self) -> None:
        self.mocks["count_updates"].return_value = 45
        resp = self.client.get("/holders/1/?start=20")
        body = resp.get_data(as_text=True)
        list_call = [
            c for c in self.mocks["fetch_updates"].call_args_list if c.args[2] == "date_desc"
        ][0]
        self.assertEqual(list_call.kwargs, {"limit": 20, "offset": 20})
        self.assertIn('href="/holders/1/?start=40">Next</a>', body)
        self.assertIn('href="/holders/1/">Previous</a>', body)

    def test_empty_holder(self) -> None:
        self.mocks["fetch_updates"].side_effect = None
        self.mocks["fetch_updates"].return_value = []
        self.mocks["count_updates"].return_value = 0
        self.mocks["fetch_update_tags"].return_value = []
        body = self.client.get("/holders/1/").get_data(as_text=True)
        self.assertIn("No updates found.", body)
        self.assertNotIn('class="months"', body)

    def test_missing_holder_is_404(self) -> None:
        self.mocks["fetch_holder"].return_value = None
        self.assertEqual(self.client.get("/holders/9/").status_code, 404)

    def test_database_failure_is_503(self) -> None:
        self.mocks["_db_connection"].side_effect = RuntimeError("DATABASE_URL is not set.")
        self.assertEqual(self.client.get("/holders/1/").status_code, 503)

    def test_last_representable_month_renders(self) -> None:
        resp = self.client.get("/holders/1/?year=9999&month=12")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("Updates in December 9999", resp.get_data(as_text=True))

    def test_notices_not_queued_when_holder_missing(self) -> None:
        self.mocks["fetch_holder"].return_value = None
        resp = self.client.get("/holders/9/?from=2020-06-10&to=2020-06-01")
        self.assertEqual(resp.status_code, 404)
        self.mocks["fetch_holder"].return_value = HOLDER
        body = self.client.get("/holders/1/").get_data(as_text=True)
        self.assertNotIn("Filter has been applied with the dates reversed.", body)

    def test_notices_not_queued_when_database_unavailable(self) -> None:
        connect = self.mocks["_db_connection"]
        side_effect = connect.side_effect
        connect.side_effect = RuntimeError("DATABASE_URL is not set.")
        resp = self.client.get("/holders/1/?to=2020-06-01")
        self.assertEqual(resp.status_code, 503)
        connect.side_effect = side_effect
        body = self.client.get("/holders/1/").get_data(as_text=True)
        self.assertNotIn("Filtered by a single date.", body)


class TestUpdateDetail(HolderRouteTestCase):
    def test_renders_update(self) -> None:
        resp = self.client.get("/holders/1/updates/3")
        self.assertEqual(resp.status_code, 200)
        body = resp.get_data(as_text=True)
        self.assertIn("June news", body)
        self.assertIn('href="/holders/1/"', body)
        self.assertEqual(self.mocks["fetch_update"].call_args.args[2], 3)

    def test_missing_update_is_404(self) -> None:
        self.mocks["fetch_update"].return_value = None
        self.assertEqual(self.client.get("/holders/1/updates/99").status_code, 404)


class TestRss(HolderRouteTestCase):
    def test_feed_orders_by_created_and_limits(self) -> None:
        self.app.config["UPDATES_SETTINGS"] = settings_module.Settings(
            database_url="postgresql://test",
            update_source="updates",
            page_size=20,
            rss_limit=2,
            db_connect_timeout=1,
        )
        resp = self.client.get("/holders/1/rss?tag=3&month=6&year=2020")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.mimetype, "application/rss+xml")
        call = self.mocks["fetch_updates"].call_args
        self.assertEqual(call.args[2], "created_desc")
        self.assertEqual(call.kwargs["limit"], 2)
        self.assertEqual(
            [type(clause).__name__ for clause in call.args[1].clauses],
            ["ParentClause"],
        )
        body = resp.get_data(as_text=True)
        self.assertLess(body.index("June news"), body.index("May news"))
        self.assertIn("http://localhost/holders/1/updates/3", body)

    def test_missing_holder_is_404(self) -> None:
        self.mocks["fetch_holder"].return_value = None
        self.assertEqual(self.client.get("/holders/1/rss").status_code, 404)


class TestDateForm(HolderRouteTestCase):
    def test_date_filter_redirect_keeps_tag(self) -> None:
        resp = self.client.get(
            "/holders/1/date-filter?from=2020-06-01&to=2020-06-10&tag=3&month=6&year=2020"
        )
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(
            resp.headers["Location"],
            "http://localhost/holders/1/?from=2020-06-01&to=2020-06-10&tag=3",
        )

    def test_date_filter_single_date_notice_survives_redirect(self) -> None:
        resp = self.client.get(
            "/holders/1/date-filter?to=2020-06-01", follow_redirects=True
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.get_data(as_text=True)
        self.assertEqual(body.count("Filtered by a single date."), 1)
        self.assertIn("Updates on 1/06/2020", body)

    def test_date_reset_keeps_only_tag(self) -> None:
        resp = self.client.get("/holders/1/date-reset?from=2020-06-01&to=2020-06-10&tag=3")
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(resp.headers["Location"], "http://localhost/holders/1/?tag=3")

    def test_date_reset_without_tag(self) -> None:
        resp = self.client.get("/holders/1/date-reset?from=2020-06-01")
        self.assertEqual(resp.headers["Location"], "http://localhost/holders/1/")
