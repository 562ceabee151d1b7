"""Sample optimization problems for testing."""

from mip_algebra import Model, sum_expr

SUPPLY = [20, 30, 25]
DEMAND = [15, 25, 35]
COSTS = [
    [4, 6, 8],
    [5, 3, 7],
    [6, 4, 5],
]
TRANSPORTATION_OPTIMUM = 335.0


def build_transportation_model() -> Model:
    """Balanced transportation problem, amount shipped x[s, d]."""
    sources = range(len(SUPPLY))
    sinks = range(len(DEMAND))

    model = Model("transportation")
    x = model.add_variable("x", s=sources, d=sinks, lb=0)
    model.set_objective(
        sum_expr(lambda s, d: COSTS[s][d] * x[s, d], s=sources, d=sinks), "min"
    )
    model.add_constraint(
        lambda s: sum_expr(lambda d: x[s, d], d=sinks) <= SUPPLY[s], s=sources
    )
    model.add_constraint(
        lambda d: sum_expr(lambda s: x[s, d], s=sources) >= DEMAND[d], d=sinks
    )
    return model


def build_assignment_model(n: int = 3) -> Model:
    """Assign n workers to n tasks; cost |i - j| + 1, optimum n."""
    workers = range(n)
    tasks = range(n)

    model = Model("assignment")
    y = model.add_variable("y", i=workers, j=tasks, kind="binary")
    model.set_objective(
        sum_expr(lambda i, j: (abs(i - j) + 1) * y[i, j], i=workers, j=tasks)
    )
    model.add_constraint(lambda i: sum_expr(lambda j: y[i, j], j=tasks) == 1, i=workers)
    model.add_constraint(lambda j: sum_expr(lambda i: y[i, j], i=workers) == 1, j=tasks)
    return model


def build_infeasible_model() -> Model:
    """x in [0, 1] with x >= 2."""
    model = Model("infeasible")
    x = model.add_variable("x", lb=0, ub=1)
    model.add_constraint(x() >= 2)
    model.set_objective(x())
    return model


def build_unbounded_model() -> Model:
    """Maximize x with only a lower bound."""
    model = Model("unbounded")
    x = model.add_variable("x", lb=0)
    model.add_constraint(x() >= 1)
    model.set_objective(x(), "max")
    return model
