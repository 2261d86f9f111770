from pivot import summarize_incident
from pivot.timeline import empty_timeline, summarize_timeline


def test_summary_report_sections(write_log):
    content = "\n".join([
        "2023-01-01T10:00:01Z ERROR Failed login from 1.2.3.4",
        "2023-01-01T10:00:02Z ERROR Failed login from 1.2.3.4",
        "2023-01-01T10:00:03Z ERROR Failed login from 1.2.3.4",
        "2023-01-01T10:00:04Z ERROR Failed login from 1.2.3.4",
        "2023-01-01T10:00:05Z INFO Accepted login from 5.6.7.8",
    ])
    report = summarize_incident(write_log("auth.log", content))

    assert report.startswith("# Incident Summary: Incident Timeline - ")
    assert "**Duration:** 2023-01-01T10:00:01Z to 2023-01-01T10:00:05Z" in report
    assert "**Total Events:** 5" in report
    assert "**Critical Events:** 4" in report
    assert "**Unique IPs Involved:** 2" in report
    assert "**Correlated Clusters:** 2" in report
    assert "- Rule Triggered: Potential Brute Force" in report
    assert "- [2023-01-01T10:00:01Z] Failed login from 1.2.3.4 (Source: text-log)" in report
    assert "Investigate source IPs" in report


def test_quiet_summary(write_log):
    report = summarize_incident(write_log("app.log", "2023-01-01T10:00:00Z INFO all good"))
    assert "**Critical Events:** 0" in report
    assert "No critical events detected." in report
    assert "## Rule Findings\n- None" in report


def test_empty_timeline_summary():
    report = summarize_timeline(empty_timeline())
    assert report == "# Incident Summary: Empty Timeline\n\nNo events found."
