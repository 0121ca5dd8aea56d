from route_action_gen.runtime.form_data import parse_form_data, set_nested_value


def test_dotted_names_nest():
    items = [("body.title", "Hi"), ("body.meta.lang", "en"), ("params.postId", "3")]
    assert parse_form_data(items) == {
        "body": {"title": "Hi", "meta": {"lang": "en"}},
        "params": {"postId": "3"},
    }


def test_indexed_names_build_padded_lists():
    items = [("body.tags[2]", "c"), ("body.tags[0]", "a")]
    assert parse_form_data(items) == {"body": {"tags": ["a", None, "c"]}}


def test_indexed_objects():
    items = [("body.items[1].name", "y"), ("body.items[0].name", "x"), ("body.items[0].qty", "2")]
    assert parse_form_data(items) == {"body": {"items": [{"name": "x", "qty": "2"}, {"name": "y"}]}}


def test_later_value_overwrites():
    assert parse_form_data([("body.title", "a"), ("body.title", "b")]) == {"body": {"title": "b"}}
    # a scalar is replaced when a deeper key arrives for the same name
    assert parse_form_data([("body", "x"), ("body.title", "t")]) == {"body": {"title": "t"}}


def test_mapping_and_none_inputs():
    assert parse_form_data({"query.page": "2"}) == {"query": {"page": "2"}}
    assert parse_form_data(None) == {}
    assert parse_form_data([]) == {}


def test_set_nested_value_ignores_empty_path():
    obj = {}
    set_nested_value(obj, "", "x")
    set_nested_value(obj, "..", "x")
    assert obj == {}


def test_oversized_index_is_kept_as_a_plain_key():
    assert parse_form_data([("body.tags[5000000]", "x")]) == {"body": {"tags[5000000]": "x"}}
    assert parse_form_data([("body.tags[1000]", "x")])["body"]["tags"][1000] == "x"
    assert parse_form_data([("body.rows[1001].name", "x")]) == {"body": {"rows[1001]": {"name": "x"}}}

    huge = "body.tags[" + "9" * 5000 + "]"
    assert parse_form_data([(huge, "x")]) == {"body": {huge[len("body."):]: "x"}}
