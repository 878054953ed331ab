"""
Properties Blueprint
"""

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from extensions import db
from rentals.models.location import Location
from rentals.models.property import Property
from rentals.reports import property_booking_rankings, top_rated_properties
from rentals.services.booking_service import parse_date
from rentals.services.property_service import PropertyService
from rentals.integrity import check_stay_dates

properties_bp = Blueprint('properties', __name__)


@properties_bp.route('/', methods=['GET'])
def list_properties():
    """List properties, optionally filtered by city, country and price"""
    query = Property.query.join(Location)

    city = request.args.get('city')
    if city:
        query = query.filter(Location.city == city)

    country = request.args.get('country')
    if country:
        query = query.filter(Location.country == country)

    max_price = request.args.get('max_price', type=float)
    if max_price is not None:
        query = query.filter(Property.price_per_night <= max_price)

    properties = query.order_by(Property.price_per_night, Property.name).all()
    return jsonify({
        'properties': [p.to_dict() for p in properties],
        'total': len(properties)
    }), 200


@properties_bp.route('/<string:property_id>', methods=['GET'])
def get_property(property_id):
    """Get property details"""
    listing = db.session.get(Property, property_id)

    if not listing:
        return jsonify({'error': 'Property not found'}), 404

    return jsonify({'property': listing.to_dict(include_host=True)}), 200


@properties_bp.route('/', methods=['POST'])
@jwt_required()
def create_property():
    """Create a new listing"""
    current_user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}

    # Validate required fields
    required_fields = ['name', 'description', 'price_per_night']
    for field in required_fields:
        if field not in data:
            return jsonify({'error': f'{field} is required'}), 400

    listing = PropertyService.create_listing(
        host_id=current_user_id,
        name=data['name'],
        description=data['description'],
        price_per_night=data['price_per_night'],
        location=data.get('location'),
        location_id=data.get('location_id'),
    )

    return jsonify({
        'message': 'Property created successfully',
        'property': listing.to_dict()
    }), 201


@properties_bp.route('/<string:property_id>/availability', methods=['GET'])
def check_availability(property_id):
    """Check whether the property is free for a stay, with a price quote"""
    listing = db.session.get(Property, property_id)
    if not listing:
        return jsonify({'error': 'Property not found'}), 404

    start_date = parse_date(request.args.get('start_date'), 'start_date')
    end_date = parse_date(request.args.get('end_date'), 'end_date')
    check_stay_dates(start_date, end_date)

    return jsonify({
        'property_id': listing.id,
        'start_date': start_date.isoformat(),
        'end_date': end_date.isoformat(),
        'available': listing.is_available(start_date, end_date),
        'quote': listing.quote(start_date, end_date)
    }), 200


@properties_bp.route('/top-rated', methods=['GET'])
def get_top_rated():
    """Properties with an average rating above min_rating (default 4.0)"""
    min_rating = request.args.get('min_rating', 4.0, type=float)
    rows = top_rated_properties(min_rating)
    return jsonify({
        'properties': [
            {
                'property_id': row['property_id'],
                'name': row['name'],
                'price_per_night': float(row['price_per_night']),
                'average_rating': round(float(row['average_rating']), 2),
            }
            for row in rows
        ]
    }), 200


@properties_bp.route('/rankings', methods=['GET'])
def get_rankings():
    """Properties ranked by number of bookings"""
    return jsonify({'rankings': property_booking_rankings()}), 200
