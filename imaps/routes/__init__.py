"""
iMAPS Routes Module
===================

API Routes untuk iMAPS application, didaftarkan oleh setup_routes() di app factory.

- auth: login, profil, user management
- master: companies, currencies, customers, suppliers, uoms, item types
- ledger: incoming / outgoing goods, adjustments (WMS) dan beginning balances
- stock_opname: stock opname WMS
- report: laporan mutasi
- insw: transmisi dan utilitas INSW
"""
