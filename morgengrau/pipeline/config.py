"""
Crawl configuration constants and paths.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Site endpoints
SITE_URL = "https://morgengrau.net"
CGI_BASE_URL = f"{SITE_URL}/cgi-bin/morgengrau/"
SEARCH_URL = os.environ.get(
    "MORGENGRAU_SEARCH_URL",
    "https://www.morgengrau.net/cgi-bin/morgengrau/event_suche_action.pl"
    "?datumundzeit=event_such_form.pl&query=date&datesearch=1",
)

# Parameters every day search carries besides year/month/day
STATIC_SEARCH_PARAMS = {
    "datumundzeit": "event_such_form.pl",
    "query": "date",
    "datesearch": "1",
}

USER_AGENT = os.environ.get(
    "MORGENGRAU_USER_AGENT",
    "morgengrau-events/1.0 (+contact: scraper@example.com)",
)

# First year with listings on the site
ORIGIN_YEAR = 2004

# Crawl limits
CONCURRENT_REQUESTS = 16
REQUEST_TIMEOUT_SECONDS = 120
MAX_QUEUE_SIZE = 10000  # ~8.4k days from 2004 to today

# Page markers
NO_RESULTS_SENTINEL = "nichts gefunden"
DATE_LABEL_PREFIX = "Events am "
DATE_LABEL_SUFFIX = ":"

# Paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_OUTPUT = DATA_DIR / "events.json"

# "json" for machine-readable logs, "console" for local runs
LOG_FORMAT = os.environ.get("MORGENGRAU_LOG_FORMAT", "json")

# German month names as they appear in date labels, after repair
GERMAN_MONTHS = {
    "januar": 1,
    "februar": 2,
    "märz": 3,
    "marz": 3,
    "maerz": 3,
    "april": 4,
    "mai": 5,
    "juni": 6,
    "juli": 7,
    "august": 8,
    "september": 9,
    "oktober": 10,
    "november": 11,
    "dezember": 12,
}
