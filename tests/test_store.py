import io
import sys
from pathlib import Path

sys.path.insert(0, str(Path.cwd()))

from mailheaders import Header, HeaderStore, header_key


def test_case_insensitive_lookup():
    store = HeaderStore()
    store.add_header('X-Foo', 'a')
    assert store.get_header('x-foo') == ['a']
    assert 'X-FOO' in store


def test_each_header_keeps_its_own_case():
    store = HeaderStore()
    store.add_header('X-Foo', 'a')
    store.add_header('x-foo', 'b')
    assert [h.name for h in store.get_matching_headers(['X-FOO'])] == ['X-Foo', 'x-foo']


def test_header_key():
    assert header_key(Header('X-Foo', 'a')) == header_key('x-FOO')
    assert Header('X-Foo', 'a').line == 'X-Foo: a'


def test_multi_value_concatenation():
    store = HeaderStore()
    store.add_header('To', 'a@x')
    store.add_header('To', 'b@x')
    assert store.get_header('To', ', ') == 'a@x, b@x'
    assert store.get_header_string('To', ' ') == 'a@x b@x'


def test_no_delimiter_returns_first_value():
    store = HeaderStore()
    store.add_header('To', 'a@x')
    store.add_header('To', 'b@x')
    assert store.get_header('To', None) == 'a@x'


def test_string_lookup_absent_and_empty():
    store = HeaderStore()
    assert store.get_header('X-Unknown', ', ') is None
    assert store.get_header('Subject', ', ') == ''


def test_canonical_names_are_registered_but_empty():
    store = HeaderStore()
    assert store.get_header('Subject') == []
    assert store.get_header('X-Unknown') is None
    assert len(store) == 0


def test_set_header_overwrites():
    store = HeaderStore()
    store.add_header('To', 'a@x')
    store.add_header('To', 'b@x')
    store.set_header('To', 'c@x')
    assert store.get_header('To') == ['c@x']


def test_set_address_header():
    class Address:
        def __init__(self, addr):
            self.addr = addr

        def __str__(self):
            return f"<{self.addr}>"

    store = HeaderStore()
    store.add_header('Cc', 'old@x')
    store.set_address_header('Cc', [Address('a@x'), Address('b@x')])
    assert store.get_header('cc') == ['<a@x>', '<b@x>']


def test_remove_unknown_header_is_noop():
    store = HeaderStore()
    store.add_header('To', 'a@x')
    before = list(store.get_all_headers())
    store.remove_header('Unknown-Header')
    assert list(store.get_all_headers()) == before
    assert store.get_header('Unknown-Header') is None


def test_remove_keeps_name_registered():
    store = HeaderStore()
    store.add_header('X-Foo', 'a')
    store.remove_header('x-foo')
    assert store.get_header('X-Foo') == []
    assert 'X-Foo' in store


def test_matching_and_non_matching_partition():
    store = HeaderStore.from_bytes(b'From: a\r\nTo: b\r\nTo: c\r\nSubject: d\r\nX-Spam: e\r\n\r\n')
    names = ['to', 'X-SPAM', 'Not-There']
    matching = list(store.get_matching_headers(names))
    non_matching = list(store.get_non_matching_headers(names))

    assert [h.value for h in matching] == ['b', 'c', 'e']
    assert [h.value for h in non_matching] == ['a', 'd']
    assert sorted(matching + non_matching) == sorted(store.get_all_headers())


def test_enumerations_are_one_shot():
    store = HeaderStore.from_bytes(b'A: 1\r\nB: 2\r\n\r\n')
    it = store.get_all_headers()
    assert len(list(it)) == 2
    assert list(it) == []
    assert len(list(store.get_all_headers())) == 2


def test_enumeration_is_a_snapshot():
    store = HeaderStore.from_bytes(b'A: 1\r\n\r\n')
    it = store.get_all_headers()
    store.add_header('B', '2')
    assert list(it) == [Header('A', '1')]


def test_header_lines():
    store = HeaderStore.from_bytes(b'From: a\r\nTo: b\r\n\r\n')
    assert list(store.get_all_header_lines()) == ['From: a', 'To: b']
    assert list(store.get_matching_header_lines(['TO'])) == ['To: b']
    assert list(store.get_non_matching_header_lines(['to'])) == ['From: a']


def test_add_header_line_folds_continuation():
    store = HeaderStore()
    store.add_header_line('Subject: Hello')
    store.add_header_line(' World')
    assert store.get_header('Subject') == ['HelloWorld']
    assert store.get_header('Subject') == HeaderStore.from_bytes(b'Subject: Hello\r\n World\r\n\r\n').get_header('Subject')


def test_add_header_line_folds_into_last_value_only():
    store = HeaderStore()
    store.add_header_line('Received: one')
    store.add_header_line('Received: two')
    store.add_header_line('\tmore')
    assert store.get_header('Received') == ['one', 'twomore']


def test_add_header_line_splits_on_first_colon():
    store = HeaderStore()
    store.add_header_line('X-Time:  09:12:38 ')
    store.add_header_line('Bare')
    assert store.get_header('X-Time') == ['09:12:38']
    assert store.get_header('Bare') == ['']


def test_continuation_without_header_is_ignored():
    store = HeaderStore()
    store.add_header_line(' orphan')
    store.add_header_line('')
    assert len(store) == 0


def test_line_sessions_are_independent():
    store = HeaderStore()
    first = store.line_session()
    first.feed('X-A: 1')
    second = store.line_session()
    second.feed(' stray')
    first.feed(' 2')
    assert store.get_header('X-A') == ['12']
    assert second.last_header_name is None


def test_stream_load_does_not_touch_line_state():
    store = HeaderStore()
    store.add_header_line('X-A: 1')
    store.load(io.BytesIO(b'X-B: 2\r\n\r\n'))
    store.add_header_line(' more')
    assert store.get_header('X-A') == ['1more']
    assert store.get_header('X-B') == ['2']


def test_default_order_in_output():
    store = HeaderStore()
    store.add_header('Subject', 's')
    store.add_header('Date', 'd')
    assert store.to_bytes() == b'Date:d\r\nSubject:s\r\n'


def test_write_to_skips_ignored_names():
    store = HeaderStore.from_bytes(b'Received: r1\r\nFrom: a\r\nReceived: r2\r\nX-A: 1\r\n\r\n')
    out = io.BytesIO()
    store.write_to(out, ['received', 'X-Not-Present'])
    assert out.getvalue() == b'From:a\r\nX-A:1\r\n'


def test_write_to_round_trips_through_parser():
    store = HeaderStore()
    store.add_header('To', 'a@x')
    store.add_header('To', 'b@x')
    store.add_header('X-Mailer', 'test')
    parsed = HeaderStore.from_bytes(store.to_bytes() + b'\r\n')
    assert parsed.get_header('To') == ['a@x', 'b@x']
    assert parsed.get_header('X-Mailer') == ['test']


def test_len_and_iter():
    store = HeaderStore.from_bytes(b'A: 1\r\nA: 2\r\nB: 3\r\n\r\n')
    assert len(store) == 3
    assert [h.value for h in store] == ['1', '2', '3']
    assert 'HeaderStore(' in repr(store)


def test_single_name_filters_are_not_split_into_letters():
    store = HeaderStore.from_bytes(b'Received: r\r\nR: x\r\nE: y\r\nFrom: a\r\n\r\n')
    assert [h.value for h in store.get_matching_headers('received')] == ['r']
    assert [h.value for h in store.get_non_matching_headers('Received')] == ['x', 'y', 'a']
    assert store.to_bytes(ignore='Received') == b'R:x\r\nE:y\r\nFrom:a\r\n'
