# tests/conftest.py
"""
Shared AIDL sources and fixtures for the aidlgraph test suite.
"""

import pytest

from aidlgraph.builder import build
from aidlgraph.linker import link
from aidlgraph.parser import parse


# ═══════════════════════════════════════════════════════════════════════
#  Sample sources
# ═══════════════════════════════════════════════════════════════════════

TEST_AIDL = """
        package com.concretepage;
        // Krumpli
        /**
         * Prepare a salad.
         *
         * This is probably the greenest food. You need:
         * - a bowl
         * - salat leaves
         */
        interface FirstService {
            const int VERSION = 4;
            String getMessage1(String name   );
            String getMessage2(String);
            String getMessage3(String  );
            oneway int getResult(int val1  , Map<String, Vector<int>> val2);
            oneway void useOtherServices(SecondService, ThirdService);
        }

        interface SecondService {
            String getMessage(String name);
            oneway int getResult(int val1, Map<String, Vector<int>> val2);
        }

        interface ThirdService {
            String getMessage(String name);
            oneway int getResult(int val1, Map<String, Vector<int>> val2);
        }
"""

SALAD_DOC = (
    "Prepare a salad. This is probably the greenest food. You need: "
    "- a bowl - salat leaves"
)

# Two files in different packages, linked through an import.
CLIENT_AIDL = """
package com.example.client;

import com.example.service;

/** Talks to the service. */
interface FirstService {
    void connect(in SecondService service);
    oneway void useOtherServices(SecondService, int);
    com.example.service.SecondService backup();
}
"""

SERVICE_AIDL = """
package com.example.service;

interface SecondService {
    String getName();
}
"""

# Mutual references between two interfaces of the same package.
CYCLE_AIDL = """
package com.cycle;

interface A {
    void talkTo(B other);
}

interface B {
    void answer(A caller);
    A self(in List<A> all);
}
"""

PARCELABLE_AIDL = """
package com.example.data;

parcelable Point {
    int x;
    int y = 0;
}

/** A polygon. */
parcelable Polygon {
    /** Corner points, in order. */
    Point[] corners;
    String name = "unnamed";
    Map<String, List<Point>> labels;
}
"""

ENUM_AIDL = """
package com.example.data;

/** Primary colors. */
@Backing(type="int")
enum Color {
    RED = 1,
    /** The green one. */
    GREEN = 2,
    BLUE,
}
"""

UNRESOLVED_AIDL = """
package com.broken;

interface Lonely {
    void meet(Stranger s);
}
"""

SHADOW_AIDL = """
package com.shadow;

parcelable String {
    int length;
}

interface Printer {
    void print(String text);
}
"""


# ═══════════════════════════════════════════════════════════════════════
#  Fixtures
# ═══════════════════════════════════════════════════════════════════════

@pytest.fixture
def concrete_file():
    return parse(TEST_AIDL, source_name="FirstService.aidl")


@pytest.fixture
def concrete_model(concrete_file):
    return link(build([concrete_file]))


@pytest.fixture
def cross_file_model():
    files = [
        parse(CLIENT_AIDL, source_name="client.aidl"),
        parse(SERVICE_AIDL, source_name="service.aidl"),
    ]
    return link(build(files))


@pytest.fixture
def cycle_model():
    return link(build([parse(CYCLE_AIDL)]))
