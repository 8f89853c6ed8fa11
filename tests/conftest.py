import pytest

RESULT_PAGE = """
<html><body>
<font>Events am 03.03.2004:</font>
<table>
  <tr><td><a class="event_title" href="#">the blues night</a></td></tr>
  <tr><td><span class="event_dates">Club X | Concert</span></td></tr>
  <tr><td class="event_text">A  B\tC</td></tr>
</table>
<a class="event" href="show_event.pl?sts=det&amp;id=42">mehr</a>
</body></html>
"""

EMPTY_DAY_PAGE = """
<html><body>
<font>Leider nichts gefunden.</font>
<a class="event_title" href="#">Stale Title</a>
<span class="event_dates">Club Y | Party</span>
<td class="event_text">leftover text</td>
</body></html>
"""

MALFORMED_PAGE = """
<html><body>
<font>Events am 04.03.2004:</font>
<a class="event_title" href="#">No Genre Here</a>
<span class="event_dates">Club Z without a separator</span>
</body></html>
"""


@pytest.fixture
def result_page() -> str:
    return RESULT_PAGE


@pytest.fixture
def empty_day_page() -> str:
    return EMPTY_DAY_PAGE


@pytest.fixture
def malformed_page() -> str:
    return MALFORMED_PAGE
