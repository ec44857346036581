"""
BDD step definitions for health feature (pytest-bdd).
Challenge: Express requirements in Gherkin; map to HTTP calls.
"""

from pytest_bdd import parsers, scenarios, then, when

# Load all scenarios from the feature file
scenarios("../features/health.feature")


@when(parsers.parse('I request "GET" "{path}"'))
def request_path(api, response, path):
    r = api.get(path)
    response["status"] = r.status_code
    response["body"] = r.json()


@then(parsers.parse("the response status should be {code:d}"))
def status_is(response, code):
    assert response["status"] == code


@then(parsers.parse('the response body should have "{key}" equals "{value}"'))
def body_field_equals(response, key, value):
    assert response["body"].get(key) == value
