from giveback.services.navigation import UrlNavigator


def test_reads_query_parameter():
    nav = UrlNavigator("/search?q=desk+lamp")
    assert nav.get_param("q") == "desk lamp"
    assert nav.get_param("page") is None


def test_set_params_replaces_query_string():
    nav = UrlNavigator("/search?q=lamp&page=3")
    nav.set_params(q="chair")
    assert nav.url == "/search?q=chair"


def test_empty_query_leaves_clean_url():
    nav = UrlNavigator("/search?q=lamp")
    nav.set_params(q="")
    assert nav.url == "/search"


def test_back_and_forward():
    nav = UrlNavigator("/search")
    nav.set_params(q="lamp")
    nav.set_params(q="chair")

    assert nav.back()
    assert nav.get_param("q") == "lamp"
    assert nav.forward()
    assert nav.get_param("q") == "chair"
    assert not nav.forward()


def test_new_entry_after_back_drops_forward_history():
    nav = UrlNavigator("/search")
    nav.set_params(q="lamp")
    nav.set_params(q="chair")
    nav.back()
    nav.set_params(q="sofa")

    assert nav.history == ["/search", "/search?q=lamp", "/search?q=sofa"]
    assert not nav.forward()


def test_setting_same_params_does_not_add_history():
    nav = UrlNavigator("/search?q=lamp")
    nav.set_params(q="lamp")
    assert nav.history == ["/search?q=lamp"]
