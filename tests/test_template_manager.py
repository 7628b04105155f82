import pytest

from artisan_doors.errors import TemplateDataError, TemplateNotFoundError
from artisan_doors.services.email_templates import format_money, generate_quote_number
from artisan_doors.services.style_loader import load_styles
from artisan_doors.services.template_manager import EmailTemplateManager


def quotation_data(**form_overrides):
    form_data = {
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane@example.com",
        "phone": "5551234567",
        "address": "12 Elm St",
        "city": "Portland",
        "state": "OR",
        "zipCode": "97201",
        "installationRequired": "yes",
        "preferredContactMethod": "phone",
        "additionalNotes": "",
    }
    form_data.update(form_overrides)
    return {
        "formData": form_data,
        "orderSummary": [{"name": "Oak Craftsman Door", "quantity": 2, "total": "2500.00"}],
        "subtotal": "2500.00",
    }


def test_unknown_template_type():
    manager = EmailTemplateManager()
    with pytest.raises(TemplateNotFoundError):
        manager.render("invoice", {})


def test_welcome_requires_email():
    manager = EmailTemplateManager()
    with pytest.raises(TemplateDataError, match="Missing required fields for welcome: email"):
        manager.render("welcome", {"firstName": "Jane"})


def test_quotation_required_fields_are_read_from_form_data():
    manager = EmailTemplateManager()
    data = quotation_data(firstName="", lastName=None)
    with pytest.raises(TemplateDataError) as exc_info:
        manager.render("quotation", data)
    assert str(exc_info.value) == "Missing required fields for quotation: firstName, lastName"


def test_types_without_rules_validate():
    assert EmailTemplateManager().validate_template_data("unsubscribe_confirmation", {}) is True


def test_render_welcome_includes_links_and_name():
    html = EmailTemplateManager().render("welcome", {
        "email": "jane@example.com",
        "firstName": "Jane",
        "products": "http://localhost:5173/products",
        "unsubscribeUrl": "http://localhost:5173/unsubscribe?email=jane%40example.com&token=abc",
    })
    assert "Hello Jane," in html
    assert 'href="http://localhost:5173/products"' in html
    assert "token=abc" in html
    assert ".container" in html  # hoja de estilos incrustada


def test_welcome_falls_back_to_generic_greeting():
    html = EmailTemplateManager().render("welcome", {"email": "jane@example.com"})
    assert "Hello there," in html


def test_render_quotation():
    html = EmailTemplateManager().render("quotation", quotation_data())
    assert "Dear Jane Doe," in html
    assert "Oak Craftsman Door" in html
    assert "$2,500.00" in html
    assert "Portland, OR 97201" in html
    assert '<span class="value">Yes</span>' in html


def test_quotation_escapes_user_content():
    html = EmailTemplateManager().render(
        "quotation", quotation_data(additionalNotes="<script>alert(1)</script>")
    )
    assert "<script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html


def test_identical_renders_are_cached():
    manager = EmailTemplateManager()
    data = {"email": "jane@example.com"}
    first = manager.render("welcome", data)
    second = manager.render("welcome", {"email": "jane@example.com"})
    assert first is second
    assert manager.cache_size == 1

    manager.render("welcome", {"email": "john@example.com"})
    assert manager.cache_size == 2


def test_cache_key_ignores_key_order():
    manager = EmailTemplateManager()
    manager.render("welcome", {"email": "jane@example.com", "firstName": "Jane"})
    manager.render("welcome", {"firstName": "Jane", "email": "jane@example.com"})
    assert manager.cache_size == 1


def test_cache_evicts_oldest_entry():
    manager = EmailTemplateManager(max_entries=2)
    for email in ("a@example.com", "b@example.com", "c@example.com"):
        manager.render("welcome", {"email": email})
    assert manager.cache_size == 2
    assert not any("a@example.com" in key for key in manager.cache)


def test_clear_cache():
    manager = EmailTemplateManager()
    manager.render("welcome", {"email": "jane@example.com"})
    manager.clear_cache()
    assert manager.cache_size == 0


def test_render_does_not_mutate_input():
    data = quotation_data()
    snapshot = repr(data)
    EmailTemplateManager().render("quotation", data)
    assert repr(data) == snapshot


def test_load_styles():
    css = load_styles("global.css")
    assert ".header" in css


def test_load_missing_styles_raises():
    with pytest.raises(FileNotFoundError):
        load_styles("missing.css")


def test_format_money():
    assert format_money("1250") == "1,250.00"
    assert format_money(19.5) == "19.50"


def test_quote_number_format():
    number = generate_quote_number()
    year, sequence = number.split("-")
    assert len(year) == 4 and len(sequence) == 4
    assert sequence.isdigit()
