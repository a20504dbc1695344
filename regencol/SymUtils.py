"""

Fast symbolic operations implemented using symengine.
"""

# third party imports
from symengine import zeros, diff

def fast_jac(expr, vs):
    """
    Evaluate the jacobian of expr w.r.t. the variables in vs
    """
    J = zeros(len(expr), len(vs))
    for i in range(len(expr)):
        for j in range(len(vs)):
            J[i, j] = diff(expr[i], vs[j])
    return J

def christoffel_forces(D, q, qd):
    """
    Coriolis and centripetal forces C(q, qd) qd of the inertia matrix D,
    from the Christoffel symbols of the first kind.
    """
    n = len(q)
    dD = [[[diff(D[i, j], q[k]) for k in range(n)] for j in range(n)] for i in range(n)]
    h = zeros(n, 1)
    for k in range(n):
        for i in range(n):
            for j in range(n):
                gamma = 0.5 * (dD[k][j][i] + dD[k][i][j] - dD[i][j][k])
                h[k, 0] += gamma * qd[i] * qd[j]
    return h
