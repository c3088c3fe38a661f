# # Python Gotchas

# ### Gotcha 1: Assigning to an outer variable
# To the confusion of many newcomers, the following simple counter
# doesn't work as expected.

counter = 0

def increment():
    try:
        counter += 1
    except UnboundLocalError as exc:
        print("UnboundLocalError:", exc)

increment()
counter

# #### Solution 1: Be explicit about writing to globals

# Any assignment inside a function makes the name local to that function for
# the *whole* body, so `counter += 1` tries to read a local that doesn't exist yet.
# One must be explicit about writing to a module-level variable by declaring it
# `global` (or `nonlocal` for an enclosing function).

def increment():
    global counter
    counter += 1

increment()
counter

# #### Solution 2: Don't share mutable state through globals

# In most cases we shouldn't rely on globals in the first place.
# Passing values in and returning results keeps the state local.

def increment(value):
    return value + 1

increment(0)

# ## Gotcha 2: Mutable default arguments

def append_to(item, target=[]):
    target.append(item)
    return target

append_to(1)
#-
append_to(2)

# The second call returns `[1, 2]`, not `[2]`. Default values are evaluated
# **once**, when the `def` statement runs, so every call shares the same list.
#
# We can see the shared object hanging off the function itself.

append_to.__defaults__

# #### Solution: Use `None` as a sentinel

def append_to(item, target=None):
    if target is None:
        target = []
    target.append(item)
    return target

append_to(1), append_to(2)

# ## Gotcha 3: Late-binding closures

multipliers = [lambda x: i * x for i in range(4)]
[m(2) for m in multipliers]

# All four functions return `6`. A closure looks up `i` when it is *called*,
# and by then the comprehension has finished with `i == 3`.

# #### Solution 1: Bind the value as a default argument

multipliers = [lambda x, i=i: i * x for i in range(4)]
[m(2) for m in multipliers]

# #### Solution 2: Use `functools.partial`

from functools import partial
from operator import mul

multipliers = [partial(mul, i) for i in range(4)]
[m(2) for m in multipliers]

# ## Gotcha 4: Identity versus equality

a = 256
b = 256
a is b

# Small integers are cached by CPython, so this *happens* to be `True`.
# Larger values built at runtime are distinct objects.

a = int("1000")
b = int("1000")
a is b

# #### Solution: Compare values with `==`
# Reserve `is` for singletons such as `None`.

a == b

# ## Gotcha 5: Copies that aren't

grid = [[0] * 3] * 3
grid[0][0] = 1
grid

# Multiplying the outer list repeats a *reference* to the same inner list,
# so changing one row changes all of them.

# #### Solution: Build each row separately

grid = [[0] * 3 for _ in range(3)]
grid[0][0] = 1
grid

# The same trap exists with `list.copy()` and slicing, which are shallow.

import copy

original = [[1, 2], [3, 4]]
shallow = original.copy()
deep = copy.deepcopy(original)
original[0].append(99)
shallow, deep

# ## Gotcha 6: Modifying a list while iterating over it

numbers = [1, 2, 2, 3, 4]
for n in numbers:
    if n % 2 == 0:
        numbers.remove(n)
numbers

# One of the `2`s survives: removing an element shifts the rest to the left
# and the loop skips the next item.

# #### Solution: Build a new list

numbers = [1, 2, 2, 3, 4]
numbers = [n for n in numbers if n % 2 != 0]
numbers

# ## Gotcha 7: Floating point comparisons

0.1 + 0.2 == 0.3

# Binary floating point can't represent `0.1` exactly.

print(f"{0.1 + 0.2:.20f}")

# #### Solution: Compare with a tolerance

import math

math.isclose(0.1 + 0.2, 0.3)

# For money and other decimal quantities use `decimal.Decimal`.

from decimal import Decimal

Decimal("0.1") + Decimal("0.2") == Decimal("0.3")
