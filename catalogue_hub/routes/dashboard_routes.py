from flask_restx import Namespace, Resource
from flask import g
from catalogue_hub.services import dashboard_service
from catalogue_hub.storage import get_storage
from catalogue_hub.utils.auth_middleware import token_required

dashboard_ns = Namespace('dashboard', description='Operations related to dashboard statistics', path='/dashboard')


@dashboard_ns.route('/stats')
class DashboardStats(Resource):
    @token_required
    @dashboard_ns.doc('dashboard_stats', security='BearerAuth')
    def get(self):
        """Summary figures for the current distributor"""
        return dashboard_service.get_stats(get_storage(), g.user['id']), 200


@dashboard_ns.route('/recent-orders')
class RecentOrders(Resource):
    @token_required
    @dashboard_ns.doc('recent_orders', security='BearerAuth')
    def get(self):
        """The five newest orders"""
        return dashboard_service.recent_orders(get_storage(), g.user['id']), 200
