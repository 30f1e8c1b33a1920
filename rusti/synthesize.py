"""Build a whole program out of the session history and one new input."""

from rusti.session import Session

# The new input is passed to this function as a block. Finding the call by
# name is how the driver recovers what the input contributed.
MARKER = '__rusti_show'

HEADER = """\
#![allow(warnings)]

fn {marker}<T: ::std::fmt::Debug>(result: T) {{
    println!("{{:?}}", result);
}}
""".format(
    marker=MARKER
)


def synthesize(session: Session, code: str) -> str:
    return (
        HEADER
        + session.view_items
        + '\nfn main() {\n'
        + session.statements
        + '\n'
        + MARKER
        + '({\n'
        + code
        + '\n});\n}\n'
    )
