"""Gym front-desk package.

Organized by feature modules (members, attendance, business) with a thin
Flask controller layer over service/repository layers. Persistence lives in
the remote REST API; the repositories here talk HTTP instead of SQL.
"""
