"""`?` 위치 플레이스홀더 변환

호출부는 항상 `?`를 사용한다. Postgres 드라이버는 `$1, $2 ...`를 요구하므로
문자열 리터럴, 따옴표 식별자, 주석 안의 `?`는 건드리지 않고 왼쪽부터 순서대로 번호를 붙인다.
"""

from collections.abc import Callable, Iterator


def _segments(query: str) -> Iterator[tuple[str, bool]]:
    """쿼리를 (조각, SQL 본문 여부)로 분리. 리터럴, 따옴표 식별자, 주석은 본문이 아님"""
    i = 0
    start = 0
    n = len(query)

    while i < n:
        ch = query[i]

        if ch in ("'", '"'):
            # 같은 따옴표 두 개는 이스케이프
            end = i + 1
            while end < n:
                if query[end] == ch:
                    if end + 1 < n and query[end + 1] == ch:
                        end += 2
                        continue
                    break
                end += 1
            end = min(end + 1, n)
        elif query.startswith("--", i):
            end = query.find("\n", i)
            end = n if end == -1 else end
        elif query.startswith("/*", i):
            end = query.find("*/", i + 2)
            end = n if end == -1 else end + 2
        else:
            i += 1
            continue

        if start < i:
            yield query[start:i], True
        yield query[i:end], False
        i = start = end

    if start < n:
        yield query[start:], True


def _rewrite(query: str, replace: Callable[[int], str]) -> tuple[str, int]:
    out: list[str] = []
    count = 0

    for text, is_code in _segments(query):
        if not is_code:
            out.append(text)
            continue
        for ch in text:
            if ch == "?":
                count += 1
                out.append(replace(count))
            else:
                out.append(ch)

    return "".join(out), count


def code_only(query: str) -> str:
    """리터럴과 주석을 공백으로 바꾼 SQL 본문 - 키워드 검사용"""
    return "".join(text if is_code else " " for text, is_code in _segments(query))


def count_placeholders(query: str) -> int:
    """쿼리 본문의 `?` 개수"""
    _, count = _rewrite(query, lambda _: "?")
    return count


def to_numbered(query: str) -> tuple[str, int]:
    """`?`를 `$1..$n`으로 변환하고 플레이스홀더 개수를 함께 반환"""
    return _rewrite(query, lambda index: f"${index}")
