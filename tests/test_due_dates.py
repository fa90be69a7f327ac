from datetime import date

from khata.utils.due_dates import default_collection_date, due_date_info
from khata.utils.reminders import build_reminder_message, whatsapp_link

TODAY = date(2026, 3, 10)


def test_labels_near_today_are_urgent():
    assert due_date_info(date(2026, 3, 10), TODAY).text == "Collection Today"
    assert due_date_info(date(2026, 3, 11), TODAY).text == "Collection Tomorrow"
    assert due_date_info(date(2026, 3, 9), TODAY).text == "Collection Yesterday"
    for d in (date(2026, 3, 9), date(2026, 3, 10), date(2026, 3, 11)):
        assert due_date_info(d, TODAY).is_urgent


def test_overdue_and_upcoming():
    overdue = due_date_info(date(2026, 3, 5), TODAY)
    assert overdue.text == "Collection 5 days ago"
    assert overdue.is_urgent
    assert overdue.days == -5

    soon = due_date_info(date(2026, 3, 13), TODAY)
    assert soon.text == "Collection in 3 days"
    assert not soon.is_urgent

    later = due_date_info(date(2026, 4, 2), TODAY)
    assert later.text == "Collection on Apr 02"


def test_default_collection_date_is_tomorrow():
    assert default_collection_date(TODAY) == date(2026, 3, 11)


def test_reminder_message_and_link():
    message = build_reminder_message("Ramesh", 1500)
    assert message == "Dear Ramesh, your payment of ₹1,500 is pending. Kindly pay at the earliest. Thank you!"
    link = whatsapp_link("+91 98765-43210", message)
    assert link.startswith("https://wa.me/919876543210?text=Dear%20Ramesh")
    assert whatsapp_link("", message) is None
    assert whatsapp_link(None, message) is None
