from planpoker.realtime import session as sessions


def test_closed_session_is_not_recreated():
    sessions.open_session("sid1")
    assert sessions.close_session("sid1") is not None

    assert sessions.get_session("sid1") is None
    assert sessions.close_session("sid1") is None


def test_bind_fails_after_close():
    sess = sessions.open_session("sid1")
    assert sessions.bind(sess, "ABC123", "p1")
    assert sess.bound

    stale = sessions.open_session("sid2")
    sessions.close_session("sid2")
    assert not sessions.bind(stale, "ABC123", "p2")
    assert not stale.bound
