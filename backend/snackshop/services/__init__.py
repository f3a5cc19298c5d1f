"""Application services: product cache, embeddings, model runtime, generation"""
