"""
Decomposition backends.

Kernel modules (plain functions on float64 arrays):
    lu: Gaussian and Crout elimination with partial pivoting
    qr: Householder QR
    cholesky: Row-oriented Cholesky with SPD detection
    eigen: tred2/tql2 and orthes/hqr2
    svd: Golub-Kahan bidiagonalization and implicit-shift QR

Available backends (pylinear.decomposition.backends.cpu):
    CPULUBackend, CPUQRBackend, CPUCholeskyBackend, CPUEigenBackend,
    CPUSVDBackend
"""
